"""Keep POST requests as POST when the server redirects them.

requests turns a POST answered with 301, 302 or 303 into a GET and drops the
body. SonarQube redirects write endpoints (issue transitions, webhook
creation) in some setups, so the status is rewritten to its method-preserving
equivalent before requests resolves the redirect.
"""

import requests

_METHOD_PRESERVING_STATUS = {
    301: 308,
    302: 307,
    303: 307,
}


def preserve_post_on_redirect(response: requests.Response, *args, **kwargs) -> requests.Response:
    """requests response hook. Runs before redirects are followed."""
    request = response.request
    if request is not None and request.method == "POST":
        replacement = _METHOD_PRESERVING_STATUS.get(response.status_code)
        if replacement is not None:
            response.status_code = replacement
    return response
