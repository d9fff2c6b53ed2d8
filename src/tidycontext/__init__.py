"""tidycontext: cached GitHub lookups over the tidymodels organization, served over MCP."""

__version__ = "0.1.0"
