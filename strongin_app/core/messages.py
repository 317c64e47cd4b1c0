"""
messages.py

Схеми повідомлень, якими воркери обмінюються через Communicator.

Усі повідомлення — це байти фіксованого формату (little-endian, без
вирівнювання), описані структурованими dtype numpy:

    SEGMENT_DTYPE – блок відрізків:               (begin: <f8, end: <f8) × n
    RECORD_DTYPE  – запис характеристики:         (value: <f8, index: <i4)
    SCALAR_DTYPE  – одне дійсне число (оцінка M):  <f8

Кодування/декодування відбувається лише на межі каналу, тому коректність
не залежить від розміщення Python-об'єктів у пам'яті воркерів.
"""

from __future__ import annotations

from typing import Optional, Sequence

import numpy as np

from .segment import CharacteristicRecord, Segment, SegmentList

SEGMENT_DTYPE = np.dtype([("begin", "<f8"), ("end", "<f8")])
RECORD_DTYPE = np.dtype([("value", "<f8"), ("index", "<i4")])
SCALAR_DTYPE = np.dtype("<f8")


class MessageFormatError(ValueError):
    """Отримано байти, які не відповідають очікуваній схемі."""


# ---------------------------------------------------------------------------
# Блок відрізків
# ---------------------------------------------------------------------------

def encode_segments(segments: Sequence[Segment]) -> bytes:
    block = np.empty(len(segments), dtype=SEGMENT_DTYPE)
    for i, seg in enumerate(segments):
        block[i] = (seg.begin, seg.end)
    return block.tobytes()


def decode_segments(payload: bytes, expected_count: Optional[int] = None) -> SegmentList:
    """
    Відновити список Segment з байтів.

    Якщо передано expected_count, додатково перевіряється кількість
    відрізків у блоці (вона відома отримувачу з WorkSplitter).
    """
    if len(payload) % SEGMENT_DTYPE.itemsize != 0:
        raise MessageFormatError(
            f"Блок відрізків має довжину {len(payload)} байт, "
            f"що не кратно {SEGMENT_DTYPE.itemsize}."
        )

    block = np.frombuffer(payload, dtype=SEGMENT_DTYPE)
    if expected_count is not None and block.size != expected_count:
        raise MessageFormatError(
            f"Очікувалось {expected_count} відрізків, отримано {block.size}."
        )

    return [Segment(float(row["begin"]), float(row["end"])) for row in block]


# ---------------------------------------------------------------------------
# Запис характеристики
# ---------------------------------------------------------------------------

def encode_record(record: CharacteristicRecord) -> bytes:
    block = np.empty(1, dtype=RECORD_DTYPE)
    block[0] = (record.value, record.index)
    return block.tobytes()


def decode_record(payload: bytes) -> CharacteristicRecord:
    if len(payload) != RECORD_DTYPE.itemsize:
        raise MessageFormatError(
            f"Запис характеристики повинен мати {RECORD_DTYPE.itemsize} байт, "
            f"отримано {len(payload)}."
        )
    row = np.frombuffer(payload, dtype=RECORD_DTYPE)[0]
    return CharacteristicRecord(value=float(row["value"]), index=int(row["index"]))


# ---------------------------------------------------------------------------
# Скаляр
# ---------------------------------------------------------------------------

def encode_scalar(value: float) -> bytes:
    return np.array([value], dtype=SCALAR_DTYPE).tobytes()


def decode_scalar(payload: bytes) -> float:
    if len(payload) != SCALAR_DTYPE.itemsize:
        raise MessageFormatError(
            f"Скаляр повинен мати {SCALAR_DTYPE.itemsize} байт, отримано {len(payload)}."
        )
    return float(np.frombuffer(payload, dtype=SCALAR_DTYPE)[0])


__all__ = [
    "SEGMENT_DTYPE",
    "RECORD_DTYPE",
    "SCALAR_DTYPE",
    "MessageFormatError",
    "encode_segments",
    "decode_segments",
    "encode_record",
    "decode_record",
    "encode_scalar",
    "decode_scalar",
]
