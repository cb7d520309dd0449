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
import asyncio
import os
import tempfile
import unittest
import sys

sys.path.append("../..")
from ksymglob.util.kallsymsUtil import parseSymbolLine, kallsymsParse
from ksymglob.util.kallsymsUtil import findKernelSymbol, filterKernelSymbols

KALLSYMS_TEXT = """ffffffff81000000 T _text
ffffffff81001000 T startup_64
ffffffff810a2b30 T schedule
ffffffff810a2c00 t schedule_timeout
0000000000000000 A fixed_percpu_data

ffffffffc0a01000 t nf_nat_cleanup\t[nf_nat]
"""


class KallsymsUtilTest(unittest.TestCase):
    def __init__(self, *args, **kwargs):
        super(KallsymsUtilTest, self).__init__(*args, **kwargs)
        # main

    def setUp(self):
        fd, self.kallsyms_path = tempfile.mkstemp(suffix=".kallsyms")
        with os.fdopen(fd, "w") as f:
            f.write(KALLSYMS_TEXT)

    def tearDown(self):
        os.remove(self.kallsyms_path)

    def testParseSymbolLine(self):
        fields = parseSymbolLine("ffffffff810a2b30 T schedule\n")
        self.assertEqual(fields, ("schedule", "T", 0xffffffff810a2b30))
        fields = parseSymbolLine("ffffffffc0a01000 t nf_nat_cleanup\t[nf_nat]\n")
        self.assertEqual(fields, ("nf_nat_cleanup", "t", 0xffffffffc0a01000))
        self.assertEqual(parseSymbolLine("\n"), None)
        self.assertEqual(parseSymbolLine("ffffffff810a2b30 T"), None)
        self.assertEqual(parseSymbolLine("zzzz T schedule"), None)

    def testParse(self):
        names = []

        def addName(name, sym_type, start):
            names.append(name)

        ret = asyncio.run(kallsymsParse(addName, kallsyms_path=self.kallsyms_path))
        self.assertEqual(ret, None)
        expected = ["_text", "startup_64", "schedule", "schedule_timeout",
                    "fixed_percpu_data", "nf_nat_cleanup"]
        self.assertEqual(names, expected)

    def testParseStop(self):
        names = []

        async def addName(name, sym_type, start):
            names.append(name)
            if name == "startup_64":
                return start
            return 0

        ret = asyncio.run(kallsymsParse(addName, kallsyms_path=self.kallsyms_path))
        self.assertEqual(ret, 0xffffffff81001000)
        self.assertEqual(names, ["_text", "startup_64"])

    def testFindKernelSymbol(self):
        addr = asyncio.run(findKernelSymbol("schedule", kallsyms_path=self.kallsyms_path))
        self.assertEqual(addr, 0xffffffff810a2b30)

        for symbol in ("no_such_symbol", "fixed_percpu_data", "sched*"):
            try:
                asyncio.run(findKernelSymbol(symbol, kallsyms_path=self.kallsyms_path))
                self.assertTrue(False)
            except KeyError:
                pass  # expected

    def testFilterKernelSymbols(self):
        symbols = asyncio.run(filterKernelSymbols("sched*", kallsyms_path=self.kallsyms_path))
        self.assertEqual(symbols, [
            ("schedule", "T", 0xffffffff810a2b30),
            ("schedule_timeout", "t", 0xffffffff810a2c00),
        ])
        symbols = asyncio.run(filterKernelSymbols("*_[0-9][0-9]", kallsyms_path=self.kallsyms_path))
        self.assertEqual([s[0] for s in symbols], ["startup_64"])
        symbols = asyncio.run(filterKernelSymbols("[bad", kallsyms_path=self.kallsyms_path))
        self.assertEqual(symbols, [])

    def testMissingFile(self):
        missing_path = self.kallsyms_path + ".missing"
        with self.assertRaises(FileNotFoundError):
            asyncio.run(findKernelSymbol("schedule", kallsyms_path=missing_path))


if __name__ == "__main__":
    # setup test files

    unittest.main()
