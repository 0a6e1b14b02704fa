"""Graph snapshot schema: nodes, typed edges, time frames.

A snapshot is the unit of input for every analysis call. Node shapes are a
tagged union on ``kind`` so each node is resolved to its concrete variant once,
when the snapshot is parsed, instead of being type-sniffed on every access.

Naive datetimes are interpreted as UTC so timestamps from different upstream
systems stay comparable.
"""

from collections import deque
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Dict, Iterator, List, Literal, Optional, Union

from pydantic import BaseModel, Field, PrivateAttr, field_validator

from veritas_analysis.errors import InvalidTimeFrameError


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes, leave aware ones untouched."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def to_millis(value: datetime) -> float:
    """Epoch milliseconds for a (possibly naive) datetime."""
    return ensure_utc(value).timestamp() * 1000.0


class NodeKind(str, Enum):
    """Discriminant of the node union."""

    CONTENT = "content"
    SOURCE = "source"
    ACCOUNT = "account"


class EdgeType(str, Enum):
    """Relation carried by an edge."""

    PUBLISHED = "PUBLISHED"  # source -> content
    SHARED = "SHARED"  # account -> content
    INTERACTED = "INTERACTED"  # account -> content
    REFERENCED = "REFERENCED"  # content -> content


class Sentiment(str, Enum):
    """Upstream sentiment label (opaque input, not computed here)."""

    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class VerificationStatus(str, Enum):
    """Verification state of a publishing source."""

    VERIFIED = "verified"
    UNVERIFIED = "unverified"
    DISPUTED = "disputed"


class ReferenceType(str, Enum):
    """Sub-type of a REFERENCED edge."""

    SUPPORT = "support"
    CONTRADICTION = "contradiction"


class TimeFrame(BaseModel):
    """Closed time interval [start, end] supplied by the caller.

    Construction does not reject ``start > end``; operations call
    ``ensure_valid()`` first so the rejection surfaces as
    InvalidTimeFrameError rather than a schema error.
    """

    start: datetime
    end: datetime

    @field_validator("start", "end")
    @classmethod
    def normalize_bounds(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    def ensure_valid(self) -> "TimeFrame":
        if self.start > self.end:
            raise InvalidTimeFrameError(self.start, self.end)
        return self

    def contains(self, moment: datetime) -> bool:
        return self.start <= ensure_utc(moment) <= self.end

    @property
    def duration_ms(self) -> float:
        return to_millis(self.end) - to_millis(self.start)


class ContentMetadata(BaseModel):
    """Verifiability signals attached to a content item."""

    links: List[str] = Field(default_factory=list)
    media: List[str] = Field(default_factory=list)
    verified: bool = False


class ContentNode(BaseModel):
    """Published content item."""

    kind: Literal["content"] = "content"
    id: str
    text: str = ""
    text_length: Optional[int] = Field(
        None, ge=0, description="Character count when text is not shipped"
    )
    toxicity: float = Field(0.0, ge=0.0, le=1.0)
    sentiment: Optional[Sentiment] = None
    timestamp: datetime
    topics: List[str] = Field(default_factory=list)
    platform: Optional[str] = None
    source_id: Optional[str] = Field(
        None, description="Publisher hint used when no PUBLISHED edge exists"
    )
    likes: int = Field(0, ge=0)
    shares: int = Field(0, ge=0)
    comments: int = Field(0, ge=0)
    reach: int = Field(0, ge=0)
    metadata: ContentMetadata = Field(default_factory=ContentMetadata)

    @field_validator("timestamp")
    @classmethod
    def normalize_timestamp(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    @property
    def character_count(self) -> int:
        if self.text_length is not None:
            return self.text_length
        return len(self.text)


class SourceNode(BaseModel):
    """Publishing source (outlet, channel, page)."""

    kind: Literal["source"] = "source"
    id: str
    name: Optional[str] = None
    credibility_score: float = Field(0.5, ge=0.0, le=1.0)
    verification_status: VerificationStatus = VerificationStatus.UNVERIFIED


class AccountNode(BaseModel):
    """Account that shares or interacts with content."""

    kind: Literal["account"] = "account"
    id: str
    handle: Optional[str] = None
    platform: Optional[str] = None
    followers_count: int = Field(0, ge=0)
    activity_count: int = Field(0, ge=0)
    influence: float = Field(0.0, ge=0.0, le=1.0)


Node = Annotated[
    Union[ContentNode, SourceNode, AccountNode],
    Field(discriminator="kind"),
]


class Edge(BaseModel):
    """Timestamped directed edge; the unit of temporal analysis."""

    id: str
    source_node_id: str
    target_node_id: str
    type: EdgeType
    timestamp: datetime
    properties: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("timestamp")
    @classmethod
    def normalize_timestamp(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    @property
    def engagement(self) -> float:
        return float(self.properties.get("engagement") or 0.0)

    @property
    def reach(self) -> float:
        return float(self.properties.get("reach") or 0.0)

    @property
    def platform(self) -> Optional[str]:
        return self.properties.get("platform")

    @property
    def reference_type(self) -> Optional[ReferenceType]:
        raw = self.properties.get("reference_type")
        if raw is None:
            return None
        try:
            return ReferenceType(str(raw).lower())
        except ValueError:
            return None

    def other_end(self, node_id: str) -> str:
        return self.target_node_id if self.source_node_id == node_id else self.source_node_id


class GraphSnapshot(BaseModel):
    """Immutable set of nodes and edges scoped to one analysis call.

    Lookup indexes are built once after validation. Analyzers only read from
    a snapshot, so one instance can be shared across worker threads.

    Usage:
        snapshot = GraphSnapshot.model_validate_json(path.read_text())
        content = snapshot.content("c-1")
        shares = snapshot.incoming("c-1", EdgeType.SHARED)
    """

    nodes: List[Node] = Field(default_factory=list)
    edges: List[Edge] = Field(default_factory=list)

    _nodes_by_id: Dict[str, Any] = PrivateAttr(default_factory=dict)
    _outgoing: Dict[str, List[Edge]] = PrivateAttr(default_factory=dict)
    _incoming: Dict[str, List[Edge]] = PrivateAttr(default_factory=dict)

    def model_post_init(self, __context: Any) -> None:
        self._nodes_by_id = {node.id: node for node in self.nodes}
        self._outgoing = {}
        self._incoming = {}
        for edge in self.edges:
            self._outgoing.setdefault(edge.source_node_id, []).append(edge)
            self._incoming.setdefault(edge.target_node_id, []).append(edge)

    @classmethod
    def empty(cls) -> "GraphSnapshot":
        return cls()

    @property
    def is_empty(self) -> bool:
        return not self.nodes and not self.edges

    def node(self, node_id: str):
        return self._nodes_by_id.get(node_id)

    def content(self, node_id: str) -> Optional[ContentNode]:
        node = self._nodes_by_id.get(node_id)
        return node if isinstance(node, ContentNode) else None

    def source(self, node_id: str) -> Optional[SourceNode]:
        node = self._nodes_by_id.get(node_id)
        return node if isinstance(node, SourceNode) else None

    def account(self, node_id: str) -> Optional[AccountNode]:
        node = self._nodes_by_id.get(node_id)
        return node if isinstance(node, AccountNode) else None

    def nodes_of_kind(self, kind: NodeKind) -> Iterator[Any]:
        return (node for node in self.nodes if node.kind == kind)

    def outgoing(self, node_id: str, edge_type: Optional[EdgeType] = None) -> List[Edge]:
        edges = self._outgoing.get(node_id, [])
        if edge_type is None:
            return list(edges)
        return [e for e in edges if e.type == edge_type]

    def incoming(self, node_id: str, edge_type: Optional[EdgeType] = None) -> List[Edge]:
        edges = self._incoming.get(node_id, [])
        if edge_type is None:
            return list(edges)
        return [e for e in edges if e.type == edge_type]

    def edges_touching(self, node_id: str) -> List[Edge]:
        # Self-loops appear in both indexes; keep them once.
        seen = set()
        result = []
        for edge in self._outgoing.get(node_id, []) + self._incoming.get(node_id, []):
            if edge.id not in seen:
                seen.add(edge.id)
                result.append(edge)
        return result

    def publisher_of(self, content_id: str) -> Optional[str]:
        """Source id that published a content item, if known."""
        published = self.incoming(content_id, EdgeType.PUBLISHED)
        if published:
            return min(published, key=lambda e: (e.timestamp, e.id)).source_node_id
        content = self.content(content_id)
        return content.source_id if content else None

    def latest_timestamp(self) -> Optional[datetime]:
        if not self.edges:
            return None
        return max(edge.timestamp for edge in self.edges)

    def restricted_to(self, timeframe: TimeFrame) -> "GraphSnapshot":
        """Sub-snapshot with edges inside the frame and the nodes they touch."""
        edges = [e for e in self.edges if timeframe.contains(e.timestamp)]
        touched = {e.source_node_id for e in edges} | {e.target_node_id for e in edges}
        nodes = [n for n in self.nodes if n.id in touched]
        return GraphSnapshot(nodes=nodes, edges=edges)

    def adjacent_ids(self, node_id: str) -> Iterator[str]:
        """Ids one hop away, counting a content's publisher hint as a link."""
        for edge in self.edges_touching(node_id):
            yield edge.other_end(node_id)
        content = self.content(node_id)
        if content is not None and content.source_id:
            yield content.source_id

    def neighborhood(self, node_id: str, hops: int = 1) -> "GraphSnapshot":
        """Sub-snapshot of every node within ``hops`` links of ``node_id``.

        Links are edges plus the ``source_id`` hint of content nodes, so a
        publisher known only by hint stays in its content's neighborhood.
        Edges between two collected nodes are kept even when they were not
        on the traversal path.
        """
        seen = {node_id}
        frontier = deque([(node_id, 0)])
        while frontier:
            current, depth = frontier.popleft()
            if depth >= hops:
                continue
            for nxt in self.adjacent_ids(current):
                if nxt not in seen:
                    seen.add(nxt)
                    frontier.append((nxt, depth + 1))
        edges = [
            e for e in self.edges
            if e.source_node_id in seen and e.target_node_id in seen
        ]
        nodes = [n for n in self.nodes if n.id in seen]
        return GraphSnapshot(nodes=nodes, edges=edges)
