"""Positional line diff between two versions"""

from typing import List

from promptura.models.prompt_version import DiffEntry


def positional_diff(content_a: str, content_b: str) -> List[DiffEntry]:
    """
    Compare two texts line by line, aligned strictly by index

    Equal lines are "unchanged". A non-empty line on only one side is
    "removed" (A) or "added" (B). Two differing non-empty lines produce a
    "removed" then an "added" entry with the same line number. No
    longest-common-subsequence alignment is attempted.
    """
    a_lines = content_a.split("\n")
    b_lines = content_b.split("\n")
    changes: List[DiffEntry] = []

    for index in range(max(len(a_lines), len(b_lines))):
        a_line = a_lines[index] if index < len(a_lines) else ""
        b_line = b_lines[index] if index < len(b_lines) else ""
        line_number = index + 1

        if a_line == b_line:
            changes.append(DiffEntry(type="unchanged", content=a_line, line_number=line_number))
        elif a_line and not b_line:
            changes.append(DiffEntry(type="removed", content=a_line, line_number=line_number))
        elif b_line and not a_line:
            changes.append(DiffEntry(type="added", content=b_line, line_number=line_number))
        else:
            changes.append(DiffEntry(type="removed", content=a_line, line_number=line_number))
            changes.append(DiffEntry(type="added", content=b_line, line_number=line_number))

    return changes
