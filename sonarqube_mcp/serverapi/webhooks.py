"""Webhooks: /api/webhooks/create (form POST) and /api/webhooks/list."""

from pydantic import Field

from sonarqube_mcp.serverapi.helper import ServerApiHelper
from sonarqube_mcp.serverapi.models import ApiModel
from sonarqube_mcp.serverapi.url import FORM_URL_ENCODED, UrlBuilder, form_body

CREATE_PATH = "/api/webhooks/create"
LIST_PATH = "/api/webhooks/list"


class Webhook(ApiModel):
    key: str | None = None
    name: str | None = None
    url: str | None = None
    has_secret: bool = False


class CreateResponse(ApiModel):
    webhook: Webhook | None = None


class ListResponse(ApiModel):
    webhooks: list[Webhook] = Field(default_factory=list)


class WebhooksApi:
    def __init__(self, helper: ServerApiHelper) -> None:
        self._helper = helper

    def create(
        self, name: str, url: str, project: str | None = None, secret: str | None = None
    ) -> CreateResponse:
        path = UrlBuilder(CREATE_PATH).add_param("organization", self._helper.organization).build()
        body = form_body([("name", name), ("url", url), ("project", project), ("secret", secret)])
        with self._helper.post(path, FORM_URL_ENCODED, body) as response:
            return CreateResponse.model_validate_json(response.body_as_string())

    def list(self, project: str | None = None) -> ListResponse:
        path = (
            UrlBuilder(LIST_PATH)
            .add_param("project", project)
            .add_param("organization", self._helper.organization)
            .build()
        )
        with self._helper.get(path) as response:
            return ListResponse.model_validate_json(response.body_as_string())
