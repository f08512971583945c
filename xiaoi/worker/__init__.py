from xiaoi.worker.run import Callback, Worker, do_request

__all__ = ["Callback", "Worker", "do_request"]
