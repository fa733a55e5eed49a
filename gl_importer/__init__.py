"""
gl-importer: resolve external-names for GitLab resources that already exist.

Runs as a composition function step. For every composed GitLab project or group whose
creation failed because the name or path "has already been taken", it looks the
resource up under its parent group and writes the GitLab id into the
crossplane.io/external-name annotation of the desired resource.

Environment:
    GITLAB_API_KEY - GitLab Personal Access Token (required for lookups)
    GITLAB_URL     - GitLab instance URL (default: https://gitlab.com)
"""

from gl_importer.cli import main

__version__ = "0.1.0"
__all__ = ["main", "__version__"]
