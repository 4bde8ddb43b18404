"""
Everpak CLI - Progress Display
Turns the core's on_progress(done, total) callbacks into a tqdm bar.
"""
from contextlib import contextmanager
from tqdm import tqdm


@contextmanager
def progress_bar(desc: str, unit: str, enabled: bool = True):
    bar = None

    def on_progress(done, total):
        nonlocal bar
        if bar is None:
            bar = tqdm(total=total, desc=desc, unit=unit, disable=not enabled)
        bar.update(done - bar.n)

    try:
        yield on_progress
    finally:
        if bar is not None:
            bar.close()


__all__ = ["progress_bar"]
