"""Languages enabled by each analyzer plugin the local engine can load."""

from enum import Enum


class Language(str, Enum):
    ANSIBLE = "ansible"
    AZURERESOURCEMANAGER = "azureresourcemanager"
    CLOUDFORMATION = "cloudformation"
    CSS = "css"
    DOCKER = "docker"
    GO = "go"
    HTML = "html"
    IPYTHON = "ipynb"
    JAVA = "java"
    JS = "js"
    JSP = "jsp"
    KOTLIN = "kotlin"
    KUBERNETES = "kubernetes"
    PHP = "php"
    PYTHON = "py"
    RUBY = "ruby"
    SECRETS = "secrets"
    TERRAFORM = "terraform"
    TS = "ts"
    XML = "xml"


SUPPORTED_LANGUAGES_BY_PLUGIN = {
    "sonar-kotlin-plugin": frozenset({Language.KOTLIN}),
    "sonar-java-plugin": frozenset({Language.JAVA}),
    "sonar-iac-plugin": frozenset({
        Language.CLOUDFORMATION,
        Language.KUBERNETES,
        Language.TERRAFORM,
        Language.AZURERESOURCEMANAGER,
        Language.ANSIBLE,
        Language.DOCKER,
    }),
    "sonar-python-plugin": frozenset({Language.PYTHON, Language.IPYTHON}),
    "sonar-ruby-plugin": frozenset({Language.RUBY}),
    # Companion of the java plugin, contributes no language of its own.
    "sonar-java-symbolic-execution-plugin": frozenset(),
    "sonar-go-plugin": frozenset({Language.GO}),
    "sonar-javascript-plugin": frozenset({Language.JS, Language.TS, Language.JSP}),
    "sonar-text-plugin": frozenset({Language.SECRETS}),
    "sonar-php-plugin": frozenset({Language.PHP}),
    "sonar-xml-plugin": frozenset({Language.XML}),
    "sonar-html-plugin": frozenset({Language.HTML, Language.CSS}),
}


def artifact_id(plugin_key: str) -> str:
    """The server reports short keys ("java"); artifacts are named "sonar-java-plugin"."""
    if plugin_key.startswith("sonar-") and plugin_key.endswith("-plugin"):
        return plugin_key
    return f"sonar-{plugin_key}-plugin"


def languages_for_plugin(plugin_key: str) -> frozenset[Language] | None:
    """Languages of a supported plugin, or None when the plugin is unknown."""
    return SUPPORTED_LANGUAGES_BY_PLUGIN.get(artifact_id(plugin_key))
