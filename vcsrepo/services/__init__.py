"""
Service layer for vcsrepo.

Contains the logic that connects drivers, the version parser and the
package loader:
- DriverSelector: Pick and initialize a driver for a location
- ScanService: Tag and branch pipelines producing a ScanResult
- ScanObserver: Progress callbacks invoked during a scan

Services are the primary API for commands to use.
"""

from .driver_selector import DEFAULT_DRIVERS, DriverEntry, DriverSelector, build_registry
from .observer import NullObserver, ProgressObserver, RecordingObserver, ScanObserver
from .scan_service import ScanService

__all__ = [
    'DEFAULT_DRIVERS',
    'DriverEntry',
    'DriverSelector',
    'build_registry',
    'NullObserver',
    'ProgressObserver',
    'RecordingObserver',
    'ScanObserver',
    'ScanService',
]
