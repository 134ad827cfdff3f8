class SettingsError(Exception):
    pass


class MalformedArgument(SettingsError, ValueError):
    argument: str
    reason: str

    def __init__(self, argument: str, reason: str):
        self.argument = argument
        self.reason = reason
        super().__init__(f"can't parse this argument: '{argument}' ({reason})")


class MalformedNumber(SettingsError, ValueError):
    key: str
    value: str

    def __init__(self, key: str, value: str):
        self.key = key
        self.value = value
        super().__init__(f"--{key} expects a decimal number, got '{value}'")


class MissingRequiredOption(SettingsError, ValueError):
    option: str

    def __init__(self, option: str):
        self.option = option
        super().__init__(f"--{option} must be specified")


class BindFailure(SettingsError, OSError):
    port: int
    reason: str

    def __init__(self, port: int, reason: str):
        self.port = port
        self.reason = reason
        super().__init__(f"can't listen on port {port}: {reason}")
