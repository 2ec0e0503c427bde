from .base import Communicator, run_guarded
from .shared import LaunchResult, SharedMemoryCommunicator, launch

# MPICommunicator импортируется явно из spmd_kmeans.comm.mpi:
# mpi4py нужен только при запуске под mpiexec.
__all__ = [
    "Communicator",
    "run_guarded",
    "LaunchResult",
    "SharedMemoryCommunicator",
    "launch",
]
