"""Bounded, same-origin crawl frontier."""
from collections import deque
from typing import Deque, Optional, Set

from ..models.crawl import CrawlTarget, QueueEntry
from ..utils.url_utils import canonical_url, get_hostname


class LinkFrontier:
    """
    Queue of ``(url, depth)`` entries driving a breadth-first crawl.

    A URL enters the frontier at most once: it is rejected when already
    visited or queued, when its depth exceeds ``max_depth`` or when its
    hostname is not one of the crawled site's hosts. URLs are compared by
    their ``canonical_url`` key. Priority entries go to the front of the
    queue, everything else to the back. ``pop`` marks the URL visited and
    counts it as processed before it is rendered, so failed pages still use
    up the page budget.
    """

    def __init__(self, target: CrawlTarget):
        self.target = target
        self.seed_host = get_hostname(target.seed_url)
        self.hosts: Set[str] = {self.seed_host} if self.seed_host else set()
        self.visited: Set[str] = set()
        self.pages_discovered = 1
        self.pages_processed = 0
        self._queue: Deque[QueueEntry] = deque([QueueEntry(url=target.seed_url, depth=0)])
        self._queued: Set[str] = {canonical_url(target.seed_url)}
        self._aliases: Set[str] = set()

    def __len__(self) -> int:
        return len(self._queue)

    @property
    def exhausted(self) -> bool:
        """True once the queue is empty or the page budget is spent."""
        return not self._queue or self.pages_processed >= self.target.max_pages

    def record_final_url(self, url: str) -> None:
        """
        Register where a visited page landed after redirects.

        Links to that URL are not followed again and links to its host are
        accepted, so a seed redirecting to ``www.`` keeps its internal links.
        """
        host = get_hostname(url)
        if host:
            self.hosts.add(host)
        self._aliases.add(canonical_url(url))

    def accepts(self, url: str, depth: int) -> bool:
        """Whether ``url`` at ``depth`` may be enqueued."""
        if depth > self.target.max_depth:
            return False
        key = canonical_url(url)
        if key in self.visited or key in self._queued or key in self._aliases:
            return False
        return get_hostname(url) in self.hosts

    def push(self, url: str, depth: int, priority: bool = False) -> bool:
        """
        Enqueue a discovered URL.

        Returns:
            True when the URL was accepted
        """
        if not self.accepts(url, depth):
            return False
        entry = QueueEntry(url=url, depth=depth)
        if priority:
            self._queue.appendleft(entry)
        else:
            self._queue.append(entry)
        self._queued.add(canonical_url(url))
        self.pages_discovered += 1
        return True

    def pop(self) -> Optional[QueueEntry]:
        """Next entry to visit, or None when the crawl is over."""
        while not self.exhausted:
            entry = self._queue.popleft()
            key = canonical_url(entry.url)
            self._queued.discard(key)
            if key in self.visited or entry.depth > self.target.max_depth:
                continue
            self.visited.add(key)
            self.pages_processed += 1
            return entry
        return None

    def peek_urls(self):
        """Queued URLs in dequeue order (for logging and tests)."""
        return [entry.url for entry in self._queue]
