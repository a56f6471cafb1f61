"""笔记 AI 动作使用的固定指令。"""

SUMMARIZE_SYSTEM_PROMPT = (
    "You summarize personal notes. Return a 1-2 sentence summary. "
    "Be concise and helpful."
)

REWRITE_SYSTEM_PROMPT = (
    "You rewrite personal notes to be clearer and more concise "
    "while preserving all important details."
)


def summarize_user_prompt(body: str) -> str:
    return f"Here is the note:\n\n{body}"


def rewrite_user_prompt(body: str) -> str:
    return f"Rewrite this note:\n\n{body}"
