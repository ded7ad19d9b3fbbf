#
# (C) Copyright 2011 Jacek Konieczny <jajcus@jajcus.net>
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU Lesser General Public License Version
# 2.1 as published by the Free Software Foundation.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Lesser General Public License for more details.
#
# You should have received a copy of the GNU Lesser General Public
# License along with this program; if not, write to the Free Software
# Foundation, Inc., 675 Mass Ave, Cambridge, MA 02139, USA.
#

"""Event processing and asynchronous task execution.

:Variables:
    - `EventBus`: the event queue and dispatch loop
    - `TornadoTaskPool`: executor for asynchronous tasks
"""

__docformat__ = "restructuredtext en"

from .events import EventBus
from .tornado import TornadoTaskPool

# vi: sts=4 et sw=4
