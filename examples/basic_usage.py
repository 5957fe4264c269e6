"""
Basic Usage Example: Sensor Readings

This example demonstrates the core arrowderive workflow:
1. Declare a record type with annotated fields
2. Inspect the derivation model and the reserved artifact names
3. Resolve columnar field descriptors
4. Generate a Polars schema for the record
"""

from datetime import date, datetime

import polars as pl

from arrowderive import ArrowField, ArrowRecord, datatypes, enable_vec_for_type
from arrowderive.primitives import Float32, UInt8, UInt16


# A custom leaf type, usable as a list item
@enable_vec_for_type
class Celsius(float, ArrowField):
    """Temperature in degrees Celsius."""

    @classmethod
    def columnar_descriptor(cls):
        return datatypes.Float32


class SensorReading(ArrowRecord, arrow_convert="serialize_only"):
    """One batch of readings reported by a sensor."""

    sensor: str
    station: UInt16
    taken_on: date
    taken_at: datetime
    battery: Float32 | None
    temperatures: list[Celsius | None]
    raw_frame: list[UInt8]


def main() -> None:
    model = SensorReading.derivation()
    print(f"Record: {model.name} (mode: {model.mode.value})")
    print(f"  serialize:   {model.mode.derives_serialize}")
    print(f"  deserialize: {model.mode.derives_deserialize}")
    print(f"  artifacts:   {', '.join(model.artifact_names())}")

    print("\nField descriptors:")
    for field in SensorReading.arrow_fields():
        print(f"  {field!r}")

    print("\nPolars schema:")
    df = pl.DataFrame(schema=SensorReading.to_polars_schema())
    print(df.schema)


if __name__ == "__main__":
    main()
