"""
Module for waiting on a job and displaying its progress.
"""
import time


class JobProgressTracker:
    """Poll a job until it finishes and display its state."""

    def __init__(self, client, job_id, poll_interval=1.0, silent=False):
        """Initialize a progress tracker.

        Args:
            client (TreasureDataClient): Client used to fetch the job status
            job_id (str): The job to track
            poll_interval (float): Seconds to sleep between status checks
            silent (bool): If True, progress will not be displayed to the console
        """
        self.client = client
        self.job_id = job_id
        self.poll_interval = poll_interval
        self.silent_mode = silent
        self.last_status = None
        self.start_time = None
        self.total_runtime = 0
        self.polls = 0

    def wait(self):
        """Block until the job reaches a terminal status.

        Errors raised by the client propagate to the caller.

        Returns:
            JobStatus: The final status of the job
        """
        self.start_time = time.time()
        try:
            while True:
                status = self.client.get_job_status(self.job_id)
                self.last_status = status
                self.polls += 1
                self._display_progress()
                if status.finished:
                    return status
                time.sleep(self.poll_interval)
        finally:
            self.total_runtime = time.time() - self.start_time
            if not self.silent_mode and self.polls:
                # Leave the progress line in place
                print()

    def get_total_runtime(self):
        """Get the total runtime in seconds.

        Returns:
            float: Total runtime in seconds, or 0 if tracking hasn't started
        """
        if self.total_runtime > 0:
            return self.total_runtime
        elif self.start_time:
            return time.time() - self.start_time
        return 0

    def _display_progress(self):
        """Display current progress information."""
        if self.silent_mode or self.last_status is None:
            return

        runtime = time.time() - self.start_time if self.start_time else 0
        state = self.last_status.status or "unknown"
        progress_str = f"State: {state} | Job ID: {self.job_id} | Runtime: {runtime:.2f}s"

        start_at = self.last_status.start_at
        if not start_at.is_zero():
            progress_str += f" | Started: {start_at}"

        # Clear the line before redrawing
        print("\r" + " " * 100 + "\r" + progress_str, end="", flush=True)
