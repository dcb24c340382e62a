"""
sitebuild - build orchestration and deployment manifests for SSR sites.

Runs a site's build under a global concurrency limit, then reads the
framework's build output into a framework-agnostic description of the
functions, static assets and routing rules to provision.
"""

__version__ = "0.1.0"
