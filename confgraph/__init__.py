"""
ConfGraph - Keyword analytics for academic-conference paper corpora

Turns a flat keyword/paper corpus into:
- Thematic keyword clusters (K-means over lightweight keyword features)
- Per-cluster co-occurrence graphs with persisted keyword connections
- A unified knowledge graph with centrality, community and hub analysis

Modules:
    core        - Configuration, schemas, exception taxonomy
    clustering  - Feature vectors and K-means clustering
    graph       - Co-occurrence index, cluster graphs, NetworkX metrics, knowledge graph
    storage     - SQLite corpus index and analytics store
    pipeline    - Stage orchestration ("generate-all"), status, reports
"""

__version__ = "0.3.0"
