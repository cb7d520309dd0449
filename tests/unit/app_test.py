##############################################################################
# Copyright by The HDF Group.                                                #
# All rights reserved.                                                       #
#                                                                            #
# This file is part of HSDS (HDF5 Scalable Data Service), Libraries and      #
# Utilities.  The full HSDS copyright notice, including                      #
# terms governing use, modification, and redistribution, is contained in     #
# the file COPYING, which can be found at the root of the source code        #
# distribution tree.  If you do not have access to this file, you may        #
# request a copy from help@hdfgroup.org.                                     #
##############################################################################
import contextlib
import io
import json
import os
import tempfile
import unittest
from unittest import mock
import sys

sys.path.append("../..")
import ksymglob.ksymglob_logger as log
from ksymglob.app import main

KALLSYMS_TEXT = """ffffffff810a2b30 T schedule
ffffffff810a2c00 t schedule_timeout
ffffffff81b00000 T tcp_v4_connect
ffffffff81b10000 T tcp_v6_connect
"""

EVENTS_TEXT = """sched:sched_switch
irq:irq_handler_entry
net:netif_receive_skb
"""


class AppTest(unittest.TestCase):
    def __init__(self, *args, **kwargs):
        super(AppTest, self).__init__(*args, **kwargs)
        # main

    def setUp(self):
        self.saved_config = dict(log.config)
        self.tmp_dir = tempfile.mkdtemp()
        self.kallsyms_path = os.path.join(self.tmp_dir, "kallsyms")
        with open(self.kallsyms_path, "w") as f:
            f.write(KALLSYMS_TEXT)
        self.events_path = os.path.join(self.tmp_dir, "available_events")
        with open(self.events_path, "w") as f:
            f.write(EVENTS_TEXT)

    def tearDown(self):
        log.config.update(self.saved_config)
        os.remove(self.kallsyms_path)
        os.remove(self.events_path)
        os.rmdir(self.tmp_dir)

    def runMain(self, *args):
        argv = ["ksymglob"]
        argv.extend(args)
        stdout = io.StringIO()
        with mock.patch.object(sys, "argv", argv):
            with contextlib.redirect_stdout(stdout):
                main()
        return stdout.getvalue()

    def testEvents(self):
        output = self.runMain("--events", "sched:*", "--events_path", self.events_path)
        self.assertEqual(output, "sched:sched_switch\n")
        output = self.runMain("--events", "--events_path", self.events_path)
        self.assertEqual(output, EVENTS_TEXT)

    def testTracepoint(self):
        output = self.runMain("--tracepoint", "*:*_entry", "--events_path", self.events_path,
                              "--json")
        self.assertEqual(json.loads(output), [{"system": "irq", "event": "irq_handler_entry"}])

    def testSymbols(self):
        output = self.runMain("--symbols", "tcp_v[46]_*", "--kallsyms_path", self.kallsyms_path)
        self.assertEqual(output, "ffffffff81b00000 T tcp_v4_connect\n"
                                 "ffffffff81b10000 T tcp_v6_connect\n")

    def testLookup(self):
        output = self.runMain("--lookup", "schedule", "--kallsyms_path", self.kallsyms_path)
        self.assertEqual(output, "ffffffff810a2b30\n")
        with self.assertRaises(SystemExit):
            self.runMain("--lookup", "nope", "--kallsyms_path", self.kallsyms_path)

    def testBadPattern(self):
        with self.assertRaises(SystemExit) as cm:
            self.runMain("--symbols", "tcp_v[6-4]_*", "--kallsyms_path", self.kallsyms_path)
        self.assertTrue("invalid range" in str(cm.exception.code))


if __name__ == "__main__":
    # setup test files

    unittest.main()
