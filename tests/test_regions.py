import unittest

from tr2_stack_tool.models import RegionEvent, SLASH_PLACEHOLDER
from tr2_stack_tool.regions import apply_region_event, synthetic_label, escape_label, unescape_label


class TestRegionSynthesizer(unittest.TestCase):
    def setUp(self):
        self.records = {}

    def enter(self, sid, epoch, category='index', label='do_read_index'):
        return apply_region_event(self.records, RegionEvent(sid=sid, kind='region_enter', epoch=epoch,
                                                            category=category, label=label))

    def leave(self, sid, epoch, category='index', label='do_read_index'):
        return apply_region_event(self.records, RegionEvent(sid=sid, kind='region_leave', epoch=epoch,
                                                            category=category, label=label))

    def test_synthetic_label_escapes_slashes(self):
        label = synthetic_label('index', 'a/b')
        self.assertEqual(label, 'REGION:index' + SLASH_PLACEHOLDER + 'a' + SLASH_PLACEHOLDER + 'b')
        self.assertNotIn('/', label)
        self.assertEqual(unescape_label(label), 'REGION:index/a/b')
        self.assertEqual(escape_label('x/y'), 'x' + SLASH_PLACEHOLDER + 'y')

    def test_enter_leave_accumulate_in_arrival_order(self):
        self.enter('sid-1', 3.0)
        self.enter('sid-1', 1.0)
        record = self.leave('sid-1', 2.0)

        self.assertEqual(len(self.records), 1)
        self.assertEqual(record.sid, 'sid-1')
        self.assertEqual(record.enter_epochs, [3.0, 1.0])
        self.assertEqual(record.leave_epochs, [2.0])
        self.assertEqual(record.enter_count, 2)
        self.assertEqual(record.leave_count, 1)

    def test_records_are_keyed_by_invocation_and_label(self):
        self.enter('sid-1', 1.0)
        self.enter('sid-2', 1.0)
        self.enter('sid-1', 1.0, label='other')
        self.assertEqual(len(self.records), 3)
        self.assertIn(('sid-1', synthetic_label('index', 'do_read_index')), self.records)

    def test_final_hierarchy_is_derived_from_parent(self):
        record = self.enter('sid-1', 1.0)
        self.assertIsNone(record.final_hierarchy)
        record.parent_hierarchy = 'status'
        self.assertEqual(record.final_hierarchy, 'status/' + record.label)


if __name__ == '__main__':
    unittest.main()
