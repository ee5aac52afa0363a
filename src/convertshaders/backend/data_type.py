from enum import Enum


class DataType(Enum):
    Float = 0
    Int = 1
