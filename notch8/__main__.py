# Notch8, a Chip-8 virtual machine.
# Lindsay Gaff <lindsaygaff@gmail.com>

# To the extent possible under law, the person who associated CC0 with
# Notch8 has waived all copyright and related or neighboring rights
# to Notch8.

# You should have received a copy of the CC0 legalcode along with this
# work.  If not, see <http://creativecommons.org/publicdomain/zero/1.0/>.

from notch8.cli import run

run()
