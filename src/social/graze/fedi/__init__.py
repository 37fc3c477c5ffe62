"""
Fediverse Object Lookup

This package resolves fediverse identifiers to ActivityStreams objects and walks
collections of such objects, for services that need to read remote ActivityPub
data (actors, posts, followers and outbox collections).

Key Components:
- lookup: Object lookup by URI or handle, and lazy collection traversal
- activitypub: Document loading, WebFinger discovery and the ActivityStreams vocabulary
- config: Settings loaded from the environment
- cli: Logging setup for command line entry points

Architecture Overview:
1. Identifier Resolution:
   - Handles are normalized to acct: URIs
   - HTTP(S) URIs are fetched directly
   - Anything not fetched directly is discovered through WebFinger

2. Collection Traversal:
   - Inline collections yield their embedded items
   - Paginated collections are walked page by page as items are consumed

Nothing is cached between calls; every lookup owns its intermediate documents.
"""
