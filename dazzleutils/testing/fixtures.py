"""Test fixtures for DazzleUtils consumers.

These helpers make it easy to observe task queue scheduling and to lay out
directory trees for the filesystem helpers, without reaching into
internal state.
"""

import asyncio
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union


class JobRecorder:
    """Factory of observable jobs for TaskQueue tests.

    Every job created by :meth:`job` records when it starts and finishes
    and tracks how many recorded jobs are running at the same time.

    Example:
        recorder = JobRecorder()
        queue = TaskQueue(limit=2)
        futures = [queue.add_task(recorder.job(i, delay=0.05)) for i in range(5)]
        await asyncio.gather(*futures)
        assert recorder.max_concurrent == 2
        assert recorder.start_order == [0, 1, 2, 3, 4]
    """

    def __init__(self):
        self.events: List[Tuple[str, Any, float]] = []
        self.running = 0
        self.max_concurrent = 0
        self.start_times: Dict[Any, float] = {}
        self.release: Dict[Any, asyncio.Event] = {}

    def job(
        self,
        name: Any,
        delay: float = 0,
        result: Any = None,
        error: Optional[BaseException] = None,
        wait_for_release: bool = False
    ):
        """Create a zero-argument async job.

        Args:
            name: Identifier recorded in events
            delay: Seconds the job sleeps while running
            result: Value returned by the job (defaults to ``name``)
            error: Exception raised instead of returning
            wait_for_release: Block until :meth:`finish` is called for ``name``

        Returns:
            Zero-argument callable returning a coroutine
        """
        if wait_for_release:
            self.release[name] = asyncio.Event()

        async def _job():
            loop = asyncio.get_running_loop()
            self.running += 1
            self.max_concurrent = max(self.max_concurrent, self.running)
            self.start_times[name] = loop.time()
            self.events.append(('start', name, loop.time()))
            try:
                if delay:
                    await asyncio.sleep(delay)
                if wait_for_release:
                    await self.release[name].wait()
                if error is not None:
                    raise error
                return name if result is None else result
            finally:
                self.running -= 1
                self.events.append(('finish', name, loop.time()))

        return _job

    def finish(self, name: Any) -> None:
        """Let a job created with ``wait_for_release=True`` complete."""
        self.release[name].set()

    @property
    def start_order(self) -> List[Any]:
        return [name for kind, name, _ in self.events if kind == 'start']

    @property
    def finish_order(self) -> List[Any]:
        return [name for kind, name, _ in self.events if kind == 'finish']

    def started(self, name: Any) -> bool:
        return name in self.start_times


def build_file_tree(root: Union[str, Path], layout: Dict[str, Any]) -> Path:
    """Create files and directories described by a nested dict.

    String values become file contents, dict values become directories.

    Example:
        build_file_tree(tmp_path, {
            'a.md': '# A',
            'sub': {'b.json': '{}', 'empty': {}},
        })

    Args:
        root: Existing directory to populate
        layout: Mapping of names to contents or nested layouts

    Returns:
        The root as a Path
    """
    root = Path(root)
    for name, content in layout.items():
        path = root / name
        if isinstance(content, dict):
            path.mkdir(parents=True, exist_ok=True)
            build_file_tree(path, content)
        else:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding='utf-8')
    return root
