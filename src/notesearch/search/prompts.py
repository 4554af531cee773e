"""Prompt templates for search result summarization."""

from typing import Any

SUMMARY_SYSTEM_PROMPT = (
    "你是一个专业的小红书内容分析助手，擅长从用户笔记中提炼实用、可靠的信息。"
    "你只依据提供的笔记内容作答，不编造笔记中没有的信息。"
)

SUMMARY_INSTRUCTIONS = """请基于以上搜索结果，围绕用户的搜索意图「{query}」生成总结。

要求：
1. 严格筛选：只使用与「{query}」直接相关的内容，忽略主题不符的笔记（例如搜索购物时忽略餐厅、咖啡等内容）。
2. 按以下三个部分组织输出，每个部分使用三级标题：
### 🔍 实用建议总结
用 3-5 条要点直接回答用户最关心的问题。
### 📝 核心攻略内容
整理笔记中的具体地点、路线、方法等核心信息，并标注来源序号。
### 💡 经验分享
提炼笔记作者的亲身经验和注意事项。
3. 使用 Markdown 格式输出，不要用代码块包裹整个回答。
4. 如果相关内容不足，请如实说明，不要编造。"""

SUMMARY_TEMPLATE = """用户搜索：{query}

以下是 {count} 条相关笔记：

{results}

{instructions}"""

RESULT_TEMPLATE = """【{index}】{title}
内容：{content}
来源：{url}
相关性评分：{relevance:.2f}"""


def _truncate(text: str, max_chars: int) -> str:
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + "..."


def format_results_for_summary(results: list[dict[str, Any]], content_max_chars: int) -> str:
    """Enumerate results for the summary prompt.

    Args:
        results: Results carrying title, content, url and relevance_score.
        content_max_chars: Content is truncated to this many characters.

    Returns:
        Numbered result blocks separated by blank lines.
    """
    blocks = []
    for index, result in enumerate(results, start=1):
        blocks.append(
            RESULT_TEMPLATE.format(
                index=index,
                title=result.get("title", ""),
                content=_truncate(result.get("content", ""), content_max_chars),
                url=result.get("url") or "无",
                relevance=result.get("relevance_score", 0.0),
            )
        )
    return "\n\n".join(blocks)


def get_summary_prompt(
    query: str,
    results: list[dict[str, Any]],
    content_max_chars: int,
    custom_prompt: str | None = None,
) -> str:
    """Build the user prompt for summarizing results.

    A custom prompt replaces the fixed instructions; the enumerated results
    and the query are always included.
    """
    instructions = custom_prompt if custom_prompt else SUMMARY_INSTRUCTIONS.format(query=query)
    return SUMMARY_TEMPLATE.format(
        query=query,
        count=len(results),
        results=format_results_for_summary(results, content_max_chars),
        instructions=instructions,
    )
