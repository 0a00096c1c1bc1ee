from pydantic import BaseModel, ConfigDict, Field
from typing import TypeAlias, Literal

SortDirection: TypeAlias = Literal["asc", "desc"]
RankingMethod: TypeAlias = Literal["standard", "dense"]
ZeroValueHandling: TypeAlias = Literal["skipZero", "includeZero"]


class RankingConfig(BaseModel):
    """Options that control a single ranking run"""

    model_config = ConfigDict(frozen=True)

    sort_direction: SortDirection = Field(
        default="desc", description="Order in which ranks are handed out"
    )
    ranking_method: RankingMethod = Field(
        default="standard",
        description="Tie handling: standard (1,2,2,4) or dense (1,2,2,3)",
    )
    zero_value_handling: ZeroValueHandling = Field(
        default="skipZero",
        description="Whether records whose value is exactly 0 take part in ranking",
    )
    grouping_enabled: bool = Field(
        default=False, description="Rank each group value independently"
    )

    @property
    def skip_zero(self) -> bool:
        return self.zero_value_handling == "skipZero"

    @property
    def descending(self) -> bool:
        return self.sort_direction == "desc"


class RankingJob(BaseModel):
    """Fields of a table to read from and write to, plus the ranking options"""

    table: str = Field(description="Table holding the records")
    source_field: str = Field(description="Numeric field the ranking is computed from")
    target_field: str = Field(description="Numeric field the rank is written to")
    group_field: str | None = Field(
        default=None, description="Optional field whose values partition the records"
    )
    view: str | None = Field(
        default=None, description="Optional view restricting which records are ranked"
    )
    sort_direction: SortDirection = "desc"
    ranking_method: RankingMethod = "standard"
    zero_value_handling: ZeroValueHandling = "skipZero"

    def to_ranking_config(self) -> RankingConfig:
        return RankingConfig(
            sort_direction=self.sort_direction,
            ranking_method=self.ranking_method,
            zero_value_handling=self.zero_value_handling,
            grouping_enabled=self.group_field is not None,
        )
