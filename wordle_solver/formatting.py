"""Text helpers shared by the strategy tree and tree player output."""


def write_turns(outer_total_turns: float, situation_count: float, write_average: bool) -> str:
    if write_average:
        # Average is always written with three decimals
        average = outer_total_turns / situation_count
        return f"{average:.3f}"

    # One decimal place only if there are partial turns and the total is small
    tenths = outer_total_turns - int(outer_total_turns)
    if tenths < 0.05 or tenths >= 0.949 or outer_total_turns >= 99.9:
        return f"{outer_total_turns:.0f}"
    return f"{outer_total_turns:.1f}"


def pad_to_length(text: str, length: int) -> str:
    if len(text) < length:
        return text + ' ' * (length - len(text))
    return text


def smart_trim(text: str) -> str:
    """
    Normalize tree text for comparison.

    Keeps each line's indent, collapses runs of spaces after it to one,
    drops blank lines and the trailing newline.
    """
    result = []
    for line in text.splitlines():
        content = line.lstrip(' ')
        if not content:
            continue
        indent = line[:len(line) - len(content)]
        result.append(indent + ' '.join(content.split()))
    return '\n'.join(result)
