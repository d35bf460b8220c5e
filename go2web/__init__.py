"""go2web - tiny fetcher & searcher built on raw sockets (no HTTP libs)"""

__version__ = "1.0.0"
