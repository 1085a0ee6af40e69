import pytest


@pytest.mark.base
def test_frozen_class():
    from pyPFASST.helpers.pfasst_helper import FrozenClass

    class Dummy(FrozenClass):
        pass

    me = Dummy()
    me.add_attr('foo')

    me.foo = 0

    you = Dummy()
    you.foo = 1
    assert me.foo != you.foo, 'Attribute is shared between class instances'

    me = Dummy()
    assert me.foo is None, 'Attribute persists after reinstantiation'

    me.add_attr('foo')
    assert Dummy.attrs.count('foo') == 1, 'Attribute was added too many times'

    class Dummy2(FrozenClass):
        pass

    Dummy2.add_attr('bar')
    you = Dummy2()
    you.bar = 5
    assert 'bar' not in Dummy.attrs, 'Attribute was added across classes'


@pytest.mark.base
def test_frozen_status_rejects_unknown_attributes():
    from pyPFASST.core.status import Status

    status = Status(time=0.5, dt=0.1)
    status.iteration = 3
    assert status.get('iteration') == 3
    assert status.get('does_not_exist', 42) == 42

    with pytest.raises(TypeError):
        status.iteraton = 4

    status.abs_res_norm = 1.0
    status.reset()
    assert status.iteration == 0
    assert status.abs_res_norm is None
    assert status.time == 0.5, 'reset must not touch the timing information'


if __name__ == '__main__':
    test_frozen_class()
