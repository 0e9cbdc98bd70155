"""Prompt templates for summarization."""

from src.core.datetime_utils import format_published_at

from .models import SummarizableItem

# Word budget for article bodies
MAX_CONTENT_WORDS = 3000

ELLIPSIS = "..."

SYSTEM_PROMPT = "You are a helpful assistant that summarizes articles concisely and accurately."

SUMMARY_PROMPT_TEMPLATE = """Summarize the following article in 2-3 concise sentences. Focus on the main points and key insights.

Article Title: {title}
Published Date: {publishedAt}
Content:
{content}

Provide a clear, informative summary:"""


def truncate_content(content: str, max_words: int = MAX_CONTENT_WORDS) -> str:
    """
    Truncate content to a word budget.

    Args:
        content: Body text
        max_words: Maximum number of words to keep

    Returns:
        The content unchanged if within budget, otherwise the first
        ``max_words`` words joined by single spaces plus an ellipsis
    """
    words = content.split()
    if len(words) <= max_words:
        return content
    return " ".join(words[:max_words]) + ELLIPSIS


def format_summary_prompt(title: str, published_at: str, content: str) -> str:
    """Fill the summary template."""
    return SUMMARY_PROMPT_TEMPLATE.format(
        title=title,
        publishedAt=published_at,
        content=content,
    )


def build_prompt(item: SummarizableItem, timezone_name: str | None = None) -> str:
    """Render the prompt for an item, truncating its body."""
    return format_summary_prompt(
        item.title,
        format_published_at(item.published_at, timezone_name),
        truncate_content(item.content),
    )
