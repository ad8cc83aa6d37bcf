"""Icon references used by completions and commands.

Icons are plain identifiers; drawing them is the host's business.
"""

from enum import Enum
from typing import Optional


class Icon(str, Enum):
    """Typed set of every icon the core can reference."""
    TABLE = "table"
    MARKDOWN = "markdown"
    SERVER = "server"
    PASTE = "paste"
    RUN = "run"
    FILE = "file"
    FOLDER = "folder"
    ACTION = "action"
    RECENT = "recent"

    CHART_CURVE = "chart_curve"
    CHART_AREA = "chart_area"
    CHART_LINE = "chart_line"
    CHART_BAR = "chart_bar"
    CHART_PIE = "chart_pie"
    CHART_SCATTER = "chart_scatter"
    CHART_BUBBLE = "chart_bubble"
    CHART_CANDLESTICK = "chart_candlestick"
    CHART_HEATMAP = "chart_heatmap"

    KDB = "kdb"
    POSTGRES = "postgres"
    MYSQL = "mysql"
    SQLITE = "sqlite"
    DUCKDB = "duckdb"
    CLICKHOUSE = "clickhouse"
    H2 = "h2"
    MSSQL = "mssql"
    ORACLE = "oracle"

    @classmethod
    def for_driver(cls, driver: Optional[str]) -> "Icon":
        """Icon for a server connection, keyed by its driver kind."""
        if not driver:
            return cls.SERVER
        return _DRIVER_ICONS.get(driver.strip().lower(), cls.SERVER)


_DRIVER_ICONS = {
    "kdb": Icon.KDB,
    "q": Icon.KDB,
    "postgres": Icon.POSTGRES,
    "postgresql": Icon.POSTGRES,
    "timescale": Icon.POSTGRES,
    "mysql": Icon.MYSQL,
    "mariadb": Icon.MYSQL,
    "sqlite": Icon.SQLITE,
    "duckdb": Icon.DUCKDB,
    "clickhouse": Icon.CLICKHOUSE,
    "h2": Icon.H2,
    "mssql": Icon.MSSQL,
    "sqlserver": Icon.MSSQL,
    "oracle": Icon.ORACLE,
}
