from typing import Any

from pydantic import Field

from sonarqube_mcp.serverapi.helper import ServerApiHelper
from sonarqube_mcp.serverapi.models import ApiModel

VALUES_PATH = "/api/settings/values"
SCA_ENABLED_SETTING = "sonar.sca.enabled"


class Setting(ApiModel):
    key: str | None = None
    value: str | None = None
    values: list[str] | None = None
    field_values: list[dict[str, Any]] | None = None
    inherited: bool = False


class ValuesResponse(ApiModel):
    settings: list[Setting] = Field(default_factory=list)
    set_secured_settings: list[str] = Field(default_factory=list)

    def get_setting_value(self, key: str) -> str | None:
        for setting in self.settings:
            if setting.key == key and setting.value is not None:
                return setting.value
        return None

    def is_boolean_setting_enabled(self, key: str) -> bool:
        value = self.get_setting_value(key)
        return value is not None and value.lower() == "true"


class SettingsApi:
    def __init__(self, helper: ServerApiHelper) -> None:
        self._helper = helper

    def values(self) -> ValuesResponse:
        with self._helper.get(VALUES_PATH) as response:
            return ValuesResponse.model_validate_json(response.body_as_string())

    def is_sca_enabled(self) -> bool:
        return self.values().is_boolean_setting_enabled(SCA_ENABLED_SETTING)
