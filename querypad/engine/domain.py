"""Read-only domain data the completion sources draw from."""

from typing import List, Optional

from pydantic import BaseModel, Field

from .icons import Icon


class TableInfo(BaseModel):
    """A known table and any example queries against it."""
    full_name: str
    queries: List[str] = Field(default_factory=list)

    @property
    def first_query(self) -> Optional[str]:
        return self.queries[0] if self.queries else None


class ServerInfo(BaseModel):
    """A named server connection."""
    name: str
    driver: str = ""

    @property
    def icon(self) -> Icon:
        return Icon.for_driver(self.driver)


class ChartType(BaseModel):
    """A chart-type token accepted by the markdown `type='...'` attribute."""
    token: str
    icon: Optional[Icon] = None


CHART_TYPES: List[ChartType] = [
    ChartType(token="grid", icon=Icon.TABLE),
    ChartType(token="timeseries", icon=Icon.CHART_CURVE),
    ChartType(token="area", icon=Icon.CHART_AREA),
    ChartType(token="line", icon=Icon.CHART_LINE),
    ChartType(token="bar", icon=Icon.CHART_BAR),
    ChartType(token="stack", icon=Icon.CHART_BAR),
    ChartType(token="bar_horizontal", icon=Icon.CHART_BAR),
    ChartType(token="stack_horizontal", icon=Icon.CHART_BAR),
    ChartType(token="pie", icon=Icon.CHART_PIE),
    ChartType(token="scatter", icon=Icon.CHART_SCATTER),
    ChartType(token="bubble", icon=Icon.CHART_BUBBLE),
    ChartType(token="candle", icon=Icon.CHART_CANDLESTICK),
    ChartType(token="depthmap"),
    ChartType(token="radar"),
    ChartType(token="treemap"),
    ChartType(token="heatmap", icon=Icon.CHART_HEATMAP),
    ChartType(token="calendar"),
    ChartType(token="boxplot"),
    ChartType(token="3dsurface"),
    ChartType(token="3dbar"),
    ChartType(token="sunburst"),
    ChartType(token="tree"),
    ChartType(token="metrics"),
    ChartType(token="sankey"),
]


class DomainSnapshot(BaseModel):
    """Tables, servers and chart types as they are right now."""
    tables: List[TableInfo] = Field(default_factory=list)
    servers: List[ServerInfo] = Field(default_factory=list)
    selected_server: str = ""
    chart_types: List[ChartType] = Field(default_factory=lambda: list(CHART_TYPES))

    @classmethod
    def from_names(cls, tables: List[str], servers: Optional[List[str]] = None) -> "DomainSnapshot":
        """Convenience builder for plain table and server names."""
        return cls(
            tables=[TableInfo(full_name=name) for name in tables],
            servers=[ServerInfo(name=name) for name in servers or []],
        )
