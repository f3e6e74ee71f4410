import enum


class PrintableEnum(enum.Enum):
    def __str__(self) -> str:
        return self.name

    __repr__ = __str__


def point_at(code: str, char_idx: int, context: int = 10) -> str:
    """Two lines: a window of `code` around `char_idx` and a caret under it"""
    print_start_idx = max(0, char_idx - context)
    print_ellipsis_pre = print_start_idx > 0
    print_end_idx = min(len(code), char_idx + context)
    print_ellipsis_post = print_end_idx < len(code)
    return "\n".join(
        [
            (
                ("..." if print_ellipsis_pre else "")
                + f"{code[print_start_idx:print_end_idx]}"
                + ("..." if print_ellipsis_post else "")
            ),
            " " * (char_idx - print_start_idx + (3 if print_ellipsis_pre else 0)) + "^",
        ]
    )
