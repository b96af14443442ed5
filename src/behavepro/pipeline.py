"""
Feature Retrieval Pipeline.

Runs Validate → Fetch → Install → Report for one project, and fans the
same sequence out over every project of a configuration file. The first
failure of any stage ends that project's pipeline; in multi-project mode
the first failure observed is raised while the other projects run to
completion on their own.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Union

from .api.behave_client import BehaveProClient
from .api.errors import BehaveProError
from .archive.installer import ArchiveInstaller
from .config.settings import Settings, validate_settings, resolve_settings, settings_from_config
from .reporting import count_features, format_summary

logger = logging.getLogger(__name__)

ResultCallback = Callable[['ProjectResult'], None]


@dataclass
class ProjectResult:
    """Outcome of a successful project fetch."""
    project_id: str
    directory: Path
    feature_count: int

    @property
    def summary(self) -> str:
        return format_summary(self.feature_count, self.directory)


def fetch_features(settings: Settings,
                   client: Optional[BehaveProClient] = None,
                   installer: Optional[ArchiveInstaller] = None) -> ProjectResult:
    """
    Fetch and install the features of a single project.

    Args:
        settings: Settings of the project
        client: Optional API client; a new one is created and closed when omitted
        installer: Optional archive installer

    Returns:
        ProjectResult describing the installed features

    Raises:
        BehaveProError: From the first stage that fails
    """
    validate_settings(settings)

    if client is None:
        with BehaveProClient() as own_client:
            archive = own_client.fetch_features(settings)
    else:
        archive = client.fetch_features(settings)

    installer = installer or ArchiveInstaller()
    directory = installer.install(archive, settings.project_dir)

    result = ProjectResult(
        project_id=settings.project_id,
        directory=directory,
        feature_count=count_features(directory)
    )
    logger.info(result.summary)
    return result


def _report_late(on_complete: Optional[ResultCallback]) -> Callable[[Future], None]:
    """Done-callback for pipelines still running when a sibling failed."""
    def _done(future: Future) -> None:
        error = future.exception()
        if error is not None:
            logger.error(f"Project failed after an earlier failure: {error}")
            return
        result = future.result()
        logger.info(result.summary)
        if on_complete:
            on_complete(result)
    return _done


def fetch_all(settings_list: List[Settings],
              max_workers: Optional[int] = None,
              on_complete: Optional[ResultCallback] = None) -> List[ProjectResult]:
    """
    Fetch several projects concurrently.

    All pipelines are submitted at once. The first failure observed is
    raised immediately; pipelines still running are not cancelled, keep
    their own output and still reach ``on_complete`` when they succeed.

    Args:
        settings_list: One settings record per project
        max_workers: Thread count (default: one per project)
        on_complete: Called with each result as soon as its project finishes

    Returns:
        Results in the order of settings_list
    """
    if not settings_list:
        logger.info("No projects configured, nothing to fetch")
        return []

    workers = max_workers or len(settings_list)
    results: List[Optional[ProjectResult]] = [None] * len(settings_list)

    executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="behavepro")
    try:
        future_to_index = {
            executor.submit(fetch_features, settings): index
            for index, settings in enumerate(settings_list)
        }
        handled = set()
        for future in as_completed(future_to_index):
            handled.add(future)
            index = future_to_index[future]
            try:
                result = future.result()
            except BehaveProError as e:
                logger.error(f"Project {settings_list[index].project_id} failed: {e}")
                for pending in future_to_index:
                    if pending not in handled:
                        pending.add_done_callback(_report_late(on_complete))
                raise
            results[index] = result
            if on_complete:
                on_complete(result)
    finally:
        # Running pipelines are left to finish
        executor.shutdown(wait=False)

    return results


def fetch_features_from_config(base: Settings,
                               cwd: Optional[Union[str, Path]] = None,
                               max_workers: Optional[int] = None,
                               on_complete: Optional[ResultCallback] = None) -> List[ProjectResult]:
    """Fetch every project listed in the configuration file of ``base``."""
    settings_list = settings_from_config(base, cwd=cwd)
    return fetch_all(settings_list, max_workers=max_workers, on_complete=on_complete)


def run(base: Settings,
        cwd: Optional[Union[str, Path]] = None,
        on_complete: Optional[ResultCallback] = None) -> List[ProjectResult]:
    """
    Fetch features in single-project or configuration-file mode.

    Explicit credentials select single-project mode; otherwise every
    project in the configuration file is fetched.
    """
    return fetch_all(resolve_settings(base, cwd=cwd), on_complete=on_complete)
