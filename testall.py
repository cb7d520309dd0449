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

import os
import sys

PYTHON_CMD = sys.executable

unit_tests = ('glob_parser_test', 'char_class_test', 'kallsyms_util_test',
              'events_util_test', 'config_test', 'logger_test', 'app_test')

if len(sys.argv) > 1:
    print("Usage: python testall.py")
    sys.exit(0)

cwd = os.getcwd()

this_dir = os.path.dirname(os.path.realpath(sys.argv[0]))
test_dir = os.path.join(this_dir, "tests", "unit")

os.chdir(test_dir)

#
# Run all ksymglob tests
#

for file_name in unit_tests:
    print(file_name)
    rc = os.system(f"{PYTHON_CMD} {file_name}.py")
    if rc != 0:
        os.chdir(cwd)
        sys.exit("Failed")

os.chdir(cwd)
print("Done!")
