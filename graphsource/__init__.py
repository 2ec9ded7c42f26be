"""graphsource: AWS describe-to-graph connectors.

Reads paginated describe responses from AWS resource APIs, with shared rate
limiting, and maps each resource into a graph item carrying linked-item
queries with blast propagation flags.
"""

__version__ = "0.1.0"
