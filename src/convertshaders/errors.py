class ConvertShadersError(Exception):
    """
    Base class for every error that aborts a shader conversion run.

    Carries optional context (shader path, variant and backend target) which is
    filled in by the pipeline as the error travels up, so the final message
    points at the unit that failed.
    """

    message: str
    path: str | None
    variant: str | None
    target: str | None

    def __init__(
        self,
        message: str,
        path: str = None,
        variant: str = None,
        target: str = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.path = path
        self.variant = variant
        self.target = target

    def add_context(self, path: str = None, variant: str = None, target: str = None):
        """Fills in context fields that are still unknown, keeps existing ones."""
        self.path = self.path or path
        self.variant = self.variant or variant
        self.target = self.target or target
        return self

    def __str__(self) -> str:
        log = [self.message]
        if self.path:
            log.append(f"Shader: {self.path}")
        if self.variant:
            log.append(f"Variant: {self.variant}")
        if self.target:
            log.append(f"Target: {self.target}")
        return "\n".join(log)


class DiscoveryError(ConvertShadersError):
    pass


class UnrecognizedShaderStage(ConvertShadersError):
    pass


class DuplicateShaderName(ConvertShadersError):
    pass


class TemplateError(ConvertShadersError):
    pass


class ConversionError(ConvertShadersError):
    output: str

    def __init__(self, message: str, output: str = "", **kwargs) -> None:
        super().__init__(message, **kwargs)
        self.output = output

    def __str__(self) -> str:
        text = super().__str__()
        if self.output:
            text += "\n\n" + self.output
        return text


class ReflectionParseError(ConvertShadersError):
    pass


class UnsupportedType(ReflectionParseError):
    pass


class BytecodeCompileError(ConversionError):
    pass


class CompilerNotFoundError(ConvertShadersError):
    pass


class ConfigError(ConvertShadersError):
    pass
