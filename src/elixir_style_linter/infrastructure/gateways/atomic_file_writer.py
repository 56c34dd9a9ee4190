"""Infrastructure: write fixed sources back with a temp file and rename."""

import logging
import os
import shutil
import tempfile
import threading
from pathlib import Path
from typing import Optional

from elixir_style_linter.domain.protocols import FixWriterProtocol

logger = logging.getLogger(__name__)


class AtomicFileWriter(FixWriterProtocol):
    """
    Replaces a file in one rename so readers see either the old or the new
    content. The temp file lives next to the target so the rename never
    crosses a filesystem. Permission bits of the original are preserved.
    """

    def write(self, path: str, content: str, cancel: Optional[threading.Event] = None) -> bool:
        target = Path(path)
        fd, tmp = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
            shutil.copymode(target, tmp)
            if cancel is not None and cancel.is_set():
                logger.debug("write to %s abandoned after cancellation", path)
                os.unlink(tmp)
                return False
            os.replace(tmp, target)
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise
        return True
