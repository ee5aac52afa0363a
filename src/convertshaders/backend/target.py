from enum import Enum


class BackendTarget(Enum):
    GLSL100ES = ("gles", "100")
    GLSL300ES = ("gles", "300")
    HLSL40 = ("hlsl", "40")

    @property
    def language(self) -> str:
        return self.value[0]

    @property
    def profile(self) -> str:
        return self.value[1]
