"""
toplangs.ingestion — Remote data retrieval.

Modules:
    github_graphql_client — urllib-based GitHub GraphQL transport.
    retry                 — Sequential retries with exponential backoff.

Transport failures are raised as toplangs.errors.TransportError and retried;
structured GraphQL errors are raised as UpstreamError and never retried.
"""
