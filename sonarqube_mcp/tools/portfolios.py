"""list_portfolios. The accepted arguments differ between SonarQube Cloud and SonarQube Server."""

from sonarqube_mcp.serverapi import ServerApi
from sonarqube_mcp.serverapi.errors import LocalValidationError
from sonarqube_mcp.serverapi.portfolios import Portfolio, PortfolioPage
from sonarqube_mcp.tools.core import Arguments, Result, SchemaBuilder, pagination_banner, render_bool


class ListPortfoliosTool:
    TOOL_NAME = "list_portfolios"

    def __init__(self, server_api: ServerApi) -> None:
        self._api = server_api
        if server_api.is_sonarqube_cloud:
            builder = (
                SchemaBuilder(self.TOOL_NAME, "List enterprise portfolios with filtering options.")
                .add_string_property(
                    "enterpriseId",
                    "Enterprise uuid. Can be omitted only if 'favorite' parameter is supplied with value true",
                )
                .add_string_property("q", "Search query to filter portfolios by name")
                .add_boolean_property(
                    "favorite",
                    "Required to be true if 'enterpriseId' parameter is omitted. If true, only returns portfolios "
                    "favorited by the logged-in user. Cannot be true when 'draft' is true",
                )
                .add_boolean_property(
                    "draft",
                    "If true, only returns drafts created by the logged-in user. Cannot be true when 'favorite' is true",
                )
                .add_number_property("pageIndex", "Index of the page to fetch (default: 1)")
                .add_number_property("pageSize", "Size of the page to fetch (default: 50)")
            )
        else:
            builder = (
                SchemaBuilder(self.TOOL_NAME, "List portfolios available in SonarQube Server with filtering options.")
                .add_string_property("q", "Search query to filter portfolios by name or key")
                .add_boolean_property("favorite", "If true, only returns favorite portfolios")
                .add_number_property("pageIndex", "1-based page number (default: 1)")
                .add_number_property("pageSize", "Page size, max 500 (default: 100)")
            )
        self.definition = builder.build()

    def execute(self, arguments: Arguments) -> Result:
        enterprise_id = arguments.get_optional_string("enterpriseId")
        favorite = arguments.get_optional_boolean("favorite")
        draft = arguments.get_optional_boolean("draft")
        if self._api.is_sonarqube_cloud:
            if not (enterprise_id and enterprise_id.strip()) and not favorite:
                raise LocalValidationError("Either 'enterpriseId' must be provided or 'favorite' must be true")
            if favorite and draft:
                raise LocalValidationError("Parameters 'favorite' and 'draft' cannot both be true at the same time")
        page = self._api.portfolios.list(
            enterprise_id=enterprise_id,
            query=arguments.get_optional_string("q"),
            favorite=favorite,
            draft=draft,
            page_index=arguments.get_optional_integer("pageIndex"),
            page_size=arguments.get_optional_integer("pageSize"),
        )
        return Result.success(render_portfolios(page))


def _render_portfolio(portfolio: Portfolio) -> str:
    line = f"Portfolio: {portfolio.name} ({portfolio.identifier})"
    if portfolio.qualifier is not None:
        line += f" | Qualifier: {portfolio.qualifier}"
    if portfolio.visibility is not None:
        line += f" | Visibility: {portfolio.visibility}"
    if portfolio.is_favorite is not None:
        line += f" | Favorite: {render_bool(portfolio.is_favorite)}"
    if portfolio.description is not None:
        line += f" | Description: {portfolio.description}"
    if portfolio.enterprise_id is not None:
        line += f" | Enterprise: {portfolio.enterprise_id}"
    if portfolio.selection is not None:
        line += f" | Selection: {portfolio.selection}"
    if portfolio.is_draft:
        line += f" | Draft (Stage: {portfolio.draft_stage})"
    if portfolio.tags:
        line += f" | Tags: {', '.join(portfolio.tags)}"
    return line


def render_portfolios(page: PortfolioPage) -> str:
    if not page.portfolios:
        return "No portfolios were found."
    text = "Available Portfolios:\n\n" + "\n".join(_render_portfolio(p) for p in page.portfolios)
    banner = pagination_banner(page.paging, "portfolios")
    if banner:
        text += "\n\n" + banner
    return text
