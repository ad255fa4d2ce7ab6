"""Webhook creation and listing, for an organization or a single project."""

from sonarqube_mcp.serverapi import ServerApi
from sonarqube_mcp.serverapi.webhooks import Webhook
from sonarqube_mcp.tools.core import Arguments, Result, SchemaBuilder


def _render_webhook(webhook: Webhook) -> str:
    return (
        f"Key: {webhook.key}\n"
        f"Name: {webhook.name}\n"
        f"URL: {webhook.url}\n"
        f"Has Secret: {'Yes' if webhook.has_secret else 'No'}"
    )


class CreateWebhookTool:
    TOOL_NAME = "create_webhook"

    def __init__(self, server_api: ServerApi) -> None:
        self._api = server_api
        self.definition = (
            SchemaBuilder(
                self.TOOL_NAME,
                "Create a new webhook. Requires 'Administer' permission on the specified project, "
                "or global 'Administer' permission.",
            )
            .add_required_string_property("name", "Name displayed in the administration console of webhooks (max 100 chars)")
            .add_required_string_property("url", "Server endpoint that will receive the webhook payload (max 512 chars)")
            .add_string_property("projectKey", "The key of the project that will own the webhook (max 400 chars)")
            .add_string_property(
                "secret",
                "If provided, secret will be used as the key to generate the HMAC hex digest value "
                "in the 'X-Sonar-Webhook-HMAC-SHA256' header (16-200 chars)",
            )
            .build()
        )

    def execute(self, arguments: Arguments) -> Result:
        response = self._api.webhooks.create(
            name=arguments.get_string_or_throw("name"),
            url=arguments.get_string_or_throw("url"),
            project=arguments.get_optional_string("projectKey"),
            secret=arguments.get_optional_string("secret"),
        )
        if response.webhook is None:
            return Result.success("Webhook created successfully.")
        return Result.success("Webhook created successfully.\n" + _render_webhook(response.webhook))


class ListWebhooksTool:
    TOOL_NAME = "list_webhooks"

    def __init__(self, server_api: ServerApi) -> None:
        self._api = server_api
        self.definition = (
            SchemaBuilder(
                self.TOOL_NAME,
                "List all webhooks for the organization or project. Requires 'Administer' permission on the "
                "specified project, or global 'Administer' permission.",
            )
            .add_string_property("projectKey", "Optional project key to list project-specific webhooks")
            .build()
        )

    def execute(self, arguments: Arguments) -> Result:
        project = arguments.get_optional_string("projectKey")
        webhooks = self._api.webhooks.list(project).webhooks
        scope = f" for project '{project}'" if project is not None else ""
        if not webhooks:
            return Result.success(f"No webhooks were found{scope}.")
        blocks = [f"Found {len(webhooks)} webhook(s){scope}:"]
        blocks.extend(_render_webhook(webhook) for webhook in webhooks)
        return Result.success("\n\n".join(blocks))
