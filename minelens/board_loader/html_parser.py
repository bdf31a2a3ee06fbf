"""
HTML Parser for Minesweeper board snapshots
Reads the DOM of a web minesweeper page into a MinesweeperBoard
"""
import re
import logging
from typing import Dict, Optional, Tuple
from bs4 import BeautifulSoup
from ..solver.game_state import MinesweeperBoard

_TYPE_PATTERN = re.compile(r'hdd_type(\d+)')


class HTMLBoardParser:
    """Parse minesweeper board from HTML DOM structure"""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def parse_board_html(self, html_content: str, expected_mines: int = None) -> Optional[MinesweeperBoard]:
        """
        Parse HTML content and extract board state

        Args:
            html_content: HTML string containing minesweeper board structure
            expected_mines: Total mine count shown by the page (overrides estimate)

        Returns:
            MinesweeperBoard object or None if parsing fails
        """
        try:
            soup = BeautifulSoup(html_content, 'html.parser')
            cells = self._find_cells(soup)

            if not cells:
                self.logger.error("No cell elements found in HTML")
                return None

            # Extract board dimensions and cell data
            max_x, max_y = 0, 0
            cell_data: Dict[Tuple[int, int], str] = {}

            for cell_div in cells:
                try:
                    x = int(cell_div.get('data-x', 0))
                    y = int(cell_div.get('data-y', 0))
                except (TypeError, ValueError) as e:
                    self.logger.warning(f"Failed to parse cell {cell_div}: {e}")
                    continue

                if x < 0 or y < 0:
                    self.logger.warning(f"Ignoring cell with negative coordinates ({x}, {y})")
                    continue

                max_x = max(max_x, x)
                max_y = max(max_y, y)
                cell_data[(x, y)] = self._parse_cell_classes(cell_div.get('class', []))

            if not cell_data:
                self.logger.error("No usable cell elements found in HTML")
                return None

            rows, cols = max_y + 1, max_x + 1
            self.logger.info(f"Detected board size: {cols}x{rows}")

            flagged_count = sum(1 for symbol in cell_data.values() if symbol == 'flag')

            if expected_mines is not None:
                total_mines = expected_mines
                self.logger.info(f"Using expected mine count: {total_mines}")
            else:
                total_mines = self.estimate_mine_count(len(cell_data), flagged_count)
                self.logger.info(f"Estimated mine count: {total_mines}")

            board = MinesweeperBoard(rows, cols, total_mines)

            # Note: board uses (row, col) = (y, x)
            for (x, y), symbol in cell_data.items():
                board.update_cell(y, x, symbol)

            self.logger.info(
                f"Successfully parsed board: {cols}x{rows} with {flagged_count} flagged cells")
            return board

        except ValueError as e:
            self.logger.error(f"Failed to parse HTML board: {e}")
            return None

    @staticmethod
    def _find_cells(soup: BeautifulSoup) -> list:
        return soup.find_all('div', class_=lambda x: x and 'cell' in x)

    def _parse_cell_classes(self, classes: list) -> str:
        """
        Map CSS classes to a board symbol

        Expected patterns:
        - hdd_closed: unrevealed cell
        - hdd_closed hdd_flag: flagged cell
        - hdd_opened hdd_type0: empty revealed cell
        - hdd_opened hdd_typeN: revealed cell with number N
        """
        if 'hdd_flag' in classes:
            return 'flag'

        if 'hdd_closed' in classes:
            return 'unrevealed'

        if 'hdd_opened' in classes:
            type_match = _TYPE_PATTERN.search(' '.join(classes))
            if type_match:
                type_num = int(type_match.group(1))
                if 0 <= type_num <= 8:
                    return str(type_num)

            # Default opened cell (assume empty)
            return 'empty'

        return 'unrevealed'

    @staticmethod
    def estimate_mine_count(total_cells: int, flagged: int) -> int:
        """
        Estimate total mine count from board size
        This is a fallback - ideally get from game UI
        """
        if total_cells <= 81:  # 9x9 beginner
            return max(flagged, 10)
        elif total_cells <= 256:  # 16x16 intermediate
            return max(flagged, 40)
        else:  # expert or custom
            return max(flagged, int(total_cells * 0.15))
