import pytest
import os
import re
import shutil
import subprocess
import sys
import warnings


@pytest.mark.mpi4py
@pytest.mark.parametrize('nlevels', [1, 2, 3])
def test_pfasst_matches_sdc_on_two_ranks(nlevels):
    # try to import MPI here, will fail if things go wrong (and not in the subprocess part)
    pytest.importorskip('mpi4py.MPI')
    if shutil.which('mpirun') is None:
        pytest.skip('mpirun not available')

    here = os.path.dirname(os.path.abspath(__file__))
    root = os.path.abspath(os.path.join(here, '..', '..', '..'))

    my_env = os.environ.copy()
    my_env['PYTHONPATH'] = root + os.pathsep + my_env.get('PYTHONPATH', '')
    my_env['HWLOC_HIDE_ERRORS'] = '2'
    my_env['OMPI_ALLOW_RUN_AS_ROOT'] = '1'
    my_env['OMPI_ALLOW_RUN_AS_ROOT_CONFIRM'] = '1'

    nprocs = 2
    niters = 40
    cmd = [
        'mpirun',
        '-np',
        str(nprocs),
        sys.executable,
        os.path.join(here, 'run_pfasst_vs_sdc.py'),
        '-l',
        str(nlevels),
        '-i',
        str(niters),
    ]
    p = subprocess.run(cmd, stdout=subprocess.PIPE, stderr=subprocess.PIPE, universal_newlines=True, env=my_env)
    print(p.stdout)
    if p.stderr:
        warnings.warn(p.stderr)
    assert p.returncode == 0, p.stderr

    results = re.findall(r'rank (\d+): levels (\d+), iterations (\d+), difference (\S+)', p.stdout)
    assert len(results) == nprocs, f'expected one line per rank, got {p.stdout}'

    for rank, levels, iterations, diff in results:
        assert int(levels) == nlevels
        assert float(diff) < 1e-10, f'PFASST differs from SDC on rank {rank}: {diff}'
        assert int(iterations) < niters, f'PFASST did not stop on convergence on rank {rank}'
