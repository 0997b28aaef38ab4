"""sepgen: provisioning file generator for SIP desk phones.

Collects the settings of one phone through a full-screen form (or from the
command line in batch mode) and writes them as SEP<MAC>.cnf.xml.
"""

from __future__ import annotations

__version__ = "0.1.0"
