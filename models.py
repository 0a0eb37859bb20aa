"""
Data model for the Koji Record Viewer
One KojiRecord per koji batch; everything else is derived from a list of them
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, List, Optional, Union

from config import FILTER_DEFAULTS, FULLY_CLOSED, FULLY_OPEN


class ControlState(str, Enum):
    """Literal damper/valve position recorded instead of a number"""
    FULLY_OPEN = FULLY_OPEN
    FULLY_CLOSED = FULLY_CLOSED

    def __str__(self):
        return self.value


# A control reading is one of:
#   ControlState  - 全開 / 全閉
#   float         - measured opening / setting
#   str           - anything else written in the cell, kept verbatim
#   None          - empty cell
ControlValue = Union[ControlState, float, str, None]


@dataclass(frozen=True)
class KojiRecord:
    """
    One koji production batch (one CSV row).

    Numeric fields use 0 for "not recorded"; a real zero reading cannot be
    told apart from an empty cell. Control fields use None for empty cells.
    """
    # 基本情報
    machine: str = ''
    date: str = ''
    origin: str = ''
    rice_age: str = ''
    variety: str = ''
    polishing_ratio: float = 0.0
    sheets: int = 0
    weight: float = 0.0

    # 温度データ
    temp_after_steaming: float = 0.0
    time_2_3h_check: str = ''
    time_2_3h_check_decimal: float = 0.0
    temp_2_3h_check: float = 0.0
    heater1_2_3h_check: float = 0.0
    heater2_2_3h_check: float = 0.0

    # ③制御2→3
    ventilation_stage3: float = 0.0
    exhaust_stage3: float = 0.0
    dehumidifier_in_stage3: ControlValue = None
    dehumidifier_out_stage3: ControlValue = None
    heater1_stage3: float = 0.0
    heater2_stage3: float = 0.0
    airflow_stage3: float = 0.0

    # ④手入れ前
    time_before_handling: str = ''
    time_before_handling_decimal: float = 0.0
    temp_before_handling: float = 0.0
    ventilation_before_handling: float = 0.0
    exhaust_before_handling: float = 0.0
    dehumidifier_in_before_handling: ControlValue = None
    dehumidifier_out_before_handling: ControlValue = None
    airflow_before_handling: float = 0.0

    # ⑤制御3→4
    change_flag_stage4: int = 0
    ventilation_stage4: float = 0.0
    exhaust_stage4: float = 0.0
    dehumidifier_in_stage4: ControlValue = None
    dehumidifier_out_stage4: ControlValue = None
    airflow_stage4: float = 0.0

    # ⑥制御4
    change_flag_stage5: int = 0
    ventilation_stage5: float = 0.0
    exhaust_stage5: float = 0.0

    # ⑦朝から除湿
    ventilation_morning_dehumid: float = 0.0
    exhaust_morning_dehumid: float = 0.0
    dehumidifier_in_morning: ControlValue = None
    dehumidifier_out_morning: ControlValue = None
    airflow_morning_dehumid: float = 0.0

    # 計算値
    temp_rise_rate_1: float = 0.0
    temp_rise_rate_2: float = 0.0
    time_to_41c: float = 0.0

    @property
    def per_sheet_weight(self) -> Optional[float]:
        """Weight loaded per sheet (kg), None when sheet count is missing"""
        if self.sheets <= 0:
            return None
        return self.weight / self.sheets

    @property
    def dehumidifier_unused(self) -> bool:
        """True when both dehumidifier valves stayed closed after handling"""
        return (
            self.dehumidifier_in_stage4 == ControlState.FULLY_CLOSED
            and self.dehumidifier_out_stage4 == ControlState.FULLY_CLOSED
        )


@dataclass(frozen=True)
class FilterCriteria:
    """
    Sidebar filter selections. Every criterion left at its default is ignored.

    - polishing_ratio / polishing_range: inclusive ratio ± range, off when ratio is 0
    - weight_min / weight_max: inclusive bounds, each off when 0
    - sheets: allowed sheet counts, empty means no restriction
    """
    variety: str = FILTER_DEFAULTS['variety']
    origin: str = FILTER_DEFAULTS['origin']
    polishing_ratio: float = FILTER_DEFAULTS['polishing_ratio']
    polishing_range: float = FILTER_DEFAULTS['polishing_range']
    weight_min: float = FILTER_DEFAULTS['weight_min']
    weight_max: float = FILTER_DEFAULTS['weight_max']
    sheets: FrozenSet[int] = frozenset()


@dataclass(frozen=True)
class FilterOptions:
    """Choices offered in the sidebar, derived from the loaded records"""
    varieties: List[str] = field(default_factory=list)
    origins: List[str] = field(default_factory=list)
    sheets: List[int] = field(default_factory=list)


@dataclass(frozen=True)
class FrequentValue:
    value: Union[float, str]
    count: int


@dataclass(frozen=True)
class ControlStats:
    """Descriptive statistics for one control item"""
    count: int = 0
    min: float = 0.0
    max: float = 0.0
    average: float = 0.0
    median: float = 0.0
    frequent_values: List[FrequentValue] = field(default_factory=list)
    frequent_state_values: List[FrequentValue] = field(default_factory=list)


@dataclass
class YearGroup:
    """Records belonging to one brewing year (year is None for unparseable dates)"""
    label: str
    year: Optional[int]
    period: str
    records: List[KojiRecord] = field(default_factory=list)
