from typing import List

from maze_weaver.core.grid import Grid


def render_ascii(grid: Grid, mark_unvisited: bool = True) -> str:
    """
    Draws the maze with '+', '-' and '|'. Each cell is three characters wide.
    Unvisited cells are filled with '.' when 'mark_unvisited' is set.
    """
    lines: List[str] = []
    for row in grid.cells:
        top = ["+"]
        middle = []
        for cell in row:
            top.append("---" if cell.walls & Grid.TOP else "   ")
            top.append("+")
            if cell.col == 0:
                middle.append("|" if cell.walls & Grid.LEFT else " ")
            middle.append(" . " if mark_unvisited and not cell.visited else "   ")
            middle.append("|" if cell.walls & Grid.RIGHT else " ")
        lines.append("".join(top))
        lines.append("".join(middle))

    bottom = ["+"]
    for cell in grid.cells[-1]:
        bottom.append("---" if cell.walls & Grid.BOTTOM else "   ")
        bottom.append("+")
    lines.append("".join(bottom))
    return "\n".join(lines)
