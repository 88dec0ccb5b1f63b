class TravelGateError(Exception):
    pass


class ConfigurationError(TravelGateError):
    def __init__(self, setting: str, message: str = "Setting is not configured") -> None:
        self.setting = setting
        self.message = message
        super().__init__(f"{message}. Setting: {setting}.")


class StorageError(TravelGateError):
    pass
