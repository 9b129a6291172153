# src/spsevb/table/fields.py
from __future__ import annotations
from enum import IntEnum, auto
from typing import List


class SPSDataField(IntEnum):
    """
    Output columns of the SPS event table.

    Members are ordered by declaration; that order is the column order of
    every table we write. The member name is the external column name, so
    renaming a member is a breaking change for downstream analysis.
    """

    AnodeFrontEnergy = auto()
    AnodeFrontShort = auto()
    AnodeFrontTime = auto()
    AnodeBackEnergy = auto()
    AnodeBackShort = auto()
    AnodeBackTime = auto()
    ScintLeftEnergy = auto()
    ScintLeftShort = auto()
    ScintLeftTime = auto()
    ScintRightEnergy = auto()
    ScintRightShort = auto()
    ScintRightTime = auto()
    CathodeEnergy = auto()
    CathodeShort = auto()
    CathodeTime = auto()
    DelayFrontLeftEnergy = auto()
    DelayFrontLeftShort = auto()
    DelayFrontLeftTime = auto()
    DelayFrontRightEnergy = auto()
    DelayFrontRightShort = auto()
    DelayFrontRightTime = auto()
    DelayBackLeftEnergy = auto()
    DelayBackLeftShort = auto()
    DelayBackLeftTime = auto()
    DelayBackRightEnergy = auto()
    DelayBackRightShort = auto()
    DelayBackRightTime = auto()
    X1 = auto()
    X2 = auto()
    Xavg = auto()
    Theta = auto()

    Cebra0Energy = auto()
    Cebra1Energy = auto()
    Cebra2Energy = auto()
    Cebra3Energy = auto()
    Cebra4Energy = auto()
    Cebra5Energy = auto()
    Cebra6Energy = auto()

    Cebra0Short = auto()
    Cebra1Short = auto()
    Cebra2Short = auto()
    Cebra3Short = auto()
    Cebra4Short = auto()
    Cebra5Short = auto()
    Cebra6Short = auto()

    Cebra0Time = auto()
    Cebra1Time = auto()
    Cebra2Time = auto()
    Cebra3Time = auto()
    Cebra4Time = auto()
    Cebra5Time = auto()
    Cebra6Time = auto()

    @property
    def column(self) -> str:
        return self.name

    def __str__(self) -> str:
        return self.name

    @classmethod
    def get_field_vec(cls) -> List["SPSDataField"]:
        """All fields in column order."""
        return sorted(cls)

    @classmethod
    def column_names(cls) -> List[str]:
        return [f.column for f in cls.get_field_vec()]
