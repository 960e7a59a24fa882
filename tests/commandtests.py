import os, shutil, tempfile, unittest
from io import StringIO

from makedag import command

class CommandTest(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.tmpdir)

    def _write(self, contents):
        path = os.path.join(self.tmpdir, 'Makefile')
        with open(path, 'w') as fh:
            fh.write(contents)
        return path

    def _run(self, *args):
        out = StringIO()
        status = command.main(list(args), out=out)
        return status, out.getvalue()

    def test_graph(self):
        path = self._write('all: prog\nprog: main.o\n\tcc -o prog main.o\n')
        status, output = self._run('-f', path)
        self.assertEqual(status, 0)
        self.assertTrue(output.startswith('digraph'))
        self.assertTrue('main.o' in output)

    def test_order(self):
        path = self._write('all: prog\nprog: main.o\n')
        status, output = self._run('-f', path, '-p', 'order')
        self.assertEqual(status, 0)
        self.assertEqual(output.split(), ['main.o', 'prog', 'all'])

    def test_source(self):
        path = self._write('X=1\nall:   a    b\n\techo done\n')
        status, output = self._run('--file', path, '--print', 'source')
        self.assertEqual(status, 0)
        self.assertEqual(output, 'X = 1\n\nall: a b\n\techo done\n')

    def test_makefile(self):
        path = self._write('all: a\n')
        status, output = self._run('-f', path, '-p', 'makefile', '-d')
        self.assertEqual(status, 0)
        self.assertTrue('Rule all: a' in output)

    def test_parse_error(self):
        path = self._write('all a\n')
        status, output = self._run('-f', path)
        self.assertEqual(status, 2)
        self.assertEqual(output, '')

    def test_cycle(self):
        path = self._write('a: b\nb: a\n')
        status, output = self._run('-f', path)
        self.assertEqual(status, 2)

    def test_missing_file(self):
        status, output = self._run('-f', os.path.join(self.tmpdir, 'nope.mk'))
        self.assertEqual(status, 2)

if __name__ == '__main__':
    unittest.main()
