from ragbot.knowledge.chunker import count_tokens
from ragbot.memory.types import ConversationTurn


def format_turn(turn: ConversationTurn) -> str:
    return f"{turn.role.value}: {turn.content}"


def format_history(
    history: list[ConversationTurn],
    max_turns: int = 0,
    max_tokens: int = 0,
) -> str:
    """Render history as ``role: content`` lines for prompt templates.

    Only the newest turns survive the caps: at most *max_turns* turns, then
    oldest lines are dropped until the text fits in *max_tokens*. A cap of 0
    disables it.
    """
    turns = history[-max_turns:] if max_turns else list(history)
    lines = [format_turn(t) for t in turns]

    if max_tokens:
        budget = max_tokens
        kept: list[str] = []
        for line in reversed(lines):
            cost = count_tokens(line) + 1  # newline
            if cost > budget:
                break
            kept.append(line)
            budget -= cost
        lines = list(reversed(kept))

    return "\n".join(lines)
