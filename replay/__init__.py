"""
replay/
-------
Event interpreters, one per algorithm.

    from replay import get_interpreter
    interp = get_interpreter("radix_sort")(trace, values=[170, 45, 75])
"""

from typing import Dict, Type

from replay.base          import Interpreter, UnhandledEventError
from replay.karatsuba     import KaratsubaInterpreter
from replay.maxima_dc     import MaximaDCInterpreter
from replay.maxima_sweep  import MaximaSweepInterpreter
from replay.quickselect   import QuickselectInterpreter
from replay.radix_sort    import RadixSortInterpreter
from replay.segment_sweep import SegmentSweepInterpreter


INTERPRETERS: Dict[str, Type[Interpreter]] = {
    cls.key: cls
    for cls in (
        KaratsubaInterpreter,
        MaximaDCInterpreter,
        MaximaSweepInterpreter,
        QuickselectInterpreter,
        RadixSortInterpreter,
        SegmentSweepInterpreter,
    )
}


def get_interpreter(key: str) -> Type[Interpreter]:
    try:
        return INTERPRETERS[key]
    except KeyError:
        raise ValueError(f"Unknown algorithm: {key}") from None


__all__ = [
    "Interpreter",
    "UnhandledEventError",
    "INTERPRETERS",
    "get_interpreter",
    "KaratsubaInterpreter",
    "MaximaDCInterpreter",
    "MaximaSweepInterpreter",
    "QuickselectInterpreter",
    "RadixSortInterpreter",
    "SegmentSweepInterpreter",
]
