"""Column definitions for the Weight Lifting Exercises (WLE) dataset."""

from itertools import product

from .base_columns import BaseColumn, ColumnMetadata


SENSORS: tuple[str, ...] = ("belt", "arm", "dumbbell", "forearm")
"""Body/equipment locations of the four inertial measurement units."""

_ORIENTATION = ("roll", "pitch", "yaw")
_AXES = ("x", "y", "z")
_RAW_SIGNALS = ("gyros", "accel", "magnet")


def sensor_columns(sensor: str) -> list[str]:
    """Return the raw (non-aggregated) measurement columns recorded by one sensor.

    Each sensor contributes its Euler angles, the total acceleration and
    x/y/z readings of gyroscope, accelerometer and magnetometer.
    """
    return [
        *(f"{angle}_{sensor}" for angle in _ORIENTATION),
        f"total_accel_{sensor}",
        *(f"{signal}_{sensor}_{axis}" for signal, axis in product(_RAW_SIGNALS, _AXES)),
    ]


class WLEColumn(BaseColumn):
    """Named columns of the [Weight Lifting Exercises dataset](http://groupware.les.inf.puc-rio.br/har).

    Six participants performed unilateral dumbbell biceps curls in five
    fashions recorded in ``classe``: with correct form (A),
    throwing the elbows to the front (B), lifting only halfway (C), lowering
    only halfway (D) and throwing the hips to the front (E).

    Columns:
    - ``X``: int - Row number (unnamed first column of the raw CSV)
    - ``user_name``: str - Participant name
    - ``raw_timestamp_part_1``: int - Epoch seconds of the reading
    - ``raw_timestamp_part_2``: int - Microsecond part of the timestamp
    - ``cvtd_timestamp``: str - Formatted timestamp
    - ``new_window``: str - "yes" on rows carrying sliding-window summary statistics
    - ``num_window``: int - Sliding-window counter
    - ``classe``: category - Exercise fashion A-E (label)
    - ``problem_id``: int - Case id of the unlabeled evaluation file

    The 52 raw sensor measurements (see :func:`sensor_columns`) and roughly
    100 window summary statistics (``kurtosis_*``, ``max_*``, ``var_*`` ...)
    are not enumerated here; they are addressed by name.
    """

    TARGET = "classe"
    """Exercise fashion (label)."""
    CLASSE = TARGET

    ROW_ID = "X"
    USER_NAME = "user_name"
    RAW_TIMESTAMP_PART_1 = "raw_timestamp_part_1"
    RAW_TIMESTAMP_PART_2 = "raw_timestamp_part_2"
    CVTD_TIMESTAMP = "cvtd_timestamp"
    NEW_WINDOW = "new_window"
    NUM_WINDOW = "num_window"
    """Window counter; numeric and not part of the default identifier exclusion."""

    PROBLEM_ID = "problem_id"
    """Case identifier of the unlabeled evaluation file."""

    def metadata(self) -> ColumnMetadata:
        return _COLUMN_METADATA_WLE[self]

    @classmethod
    def numeric_columns(cls) -> list[str]:
        return [col for sensor in SENSORS for col in sensor_columns(sensor)]

    @classmethod
    def identifier_columns(cls) -> list[str]:
        """Get the columns excluded from the predictors by default.

        Returns:
            Row id, participant, the three timestamp columns and the window flag.
        """
        return [
            cls.ROW_ID,
            cls.USER_NAME,
            cls.RAW_TIMESTAMP_PART_1,
            cls.RAW_TIMESTAMP_PART_2,
            cls.CVTD_TIMESTAMP,
            cls.NEW_WINDOW,
        ]

    @classmethod
    def target_categories(cls) -> tuple[str, ...]:
        return ("A", "B", "C", "D", "E")


_COLUMN_METADATA_WLE: dict[WLEColumn, ColumnMetadata] = {
    WLEColumn.TARGET: ColumnMetadata(
        original_name="classe",
        cleaned_name="classe",
        dtype="category",
        pretty_name="Exercise Fashion",
    ),
    WLEColumn.ROW_ID: ColumnMetadata(
        original_name="",
        cleaned_name="X",
        dtype="int64",
        pretty_name="Row",
    ),
    WLEColumn.USER_NAME: ColumnMetadata(
        original_name="user_name",
        cleaned_name="user_name",
        dtype="str",
        pretty_name="Participant",
    ),
    WLEColumn.RAW_TIMESTAMP_PART_1: ColumnMetadata(
        original_name="raw_timestamp_part_1",
        cleaned_name="raw_timestamp_part_1",
        dtype="int64",
        pretty_name="Timestamp (s)",
    ),
    WLEColumn.RAW_TIMESTAMP_PART_2: ColumnMetadata(
        original_name="raw_timestamp_part_2",
        cleaned_name="raw_timestamp_part_2",
        dtype="int64",
        pretty_name="Timestamp (us)",
    ),
    WLEColumn.CVTD_TIMESTAMP: ColumnMetadata(
        original_name="cvtd_timestamp",
        cleaned_name="cvtd_timestamp",
        dtype="str",
        pretty_name="Timestamp",
    ),
    WLEColumn.NEW_WINDOW: ColumnMetadata(
        original_name="new_window",
        cleaned_name="new_window",
        dtype="str",
        pretty_name="New Window",
    ),
    WLEColumn.NUM_WINDOW: ColumnMetadata(
        original_name="num_window",
        cleaned_name="num_window",
        dtype="int64",
        pretty_name="Window Number",
    ),
    WLEColumn.PROBLEM_ID: ColumnMetadata(
        original_name="problem_id",
        cleaned_name="problem_id",
        dtype="int64",
        pretty_name="Problem Id",
    ),
}
