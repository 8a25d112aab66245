"""tqdm progress sink fed by the result aggregator."""

import shutil

from tqdm import tqdm

MIN_COLUMNS = 104


def terminal_fits() -> bool:
    return shutil.get_terminal_size(fallback=(0, 0)).columns >= MIN_COLUMNS


class TqdmProgress:
    """tqdm bar; log lines are routed through tqdm.write while it is active."""

    BAR_FORMAT = "{l_bar}{bar:40}| {n_fmt}/{total_fmt} [{elapsed}<{remaining}{postfix}]"

    def __init__(self, logger=None):
        self.logger = logger
        self.bar = None
        self._writer = None

    def start(self, total: int):
        self.bar = tqdm(total=total, unit="req", bar_format=self.BAR_FORMAT,
                        dynamic_ncols=True, leave=True)
        self.set_throughput("warming up...")
        if self.logger:
            self._writer = self.logger.writer
            self.logger.writer = tqdm.write

    def advance(self, n: int = 1):
        self.bar.update(n)

    def set_throughput(self, label: str):
        self.bar.set_postfix_str(f"req/s: {label}", refresh=False)

    def close(self):
        if self.bar is None:
            return
        self.bar.close()
        self.bar = None
        if self.logger and self._writer is not None:
            self.logger.writer = self._writer
