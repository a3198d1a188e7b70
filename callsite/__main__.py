# SPDX-PackageName: callsite
# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: Copyright the callsite authors and contributors.

import sys

from callsite.cli import main


if __name__ == "__main__":
    sys.exit(main())
