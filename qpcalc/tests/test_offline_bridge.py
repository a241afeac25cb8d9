import asyncio
import unittest
from qpcalc.domain.Calculator import CalculatorStateMachine
from qpcalc.events.Event_Bus import EventBus
from qpcalc.infra.offline_bridge import OfflineComputeBridge, build_request
from qpcalc.infra.offline_worker import OfflineComputeWorker, handle_message


class _SilentWorker:
    '''Accepts requests and never answers them.'''
    running = True

    def __init__(self):
        self.inbox = []

    def post_message(self, message, reply):
        self.inbox.append((message, reply))


class TestHandleMessage(unittest.TestCase):

    def test_calculate_offline(self):
        response = handle_message(build_request(0.5, 20, "volume"), currency="₹")
        self.assertEqual(response, {"type": "CALCULATION_RESULT", "result": "₹10.00"})

    def test_weight_precision(self):
        response = handle_message(build_request(0.5, 20, "weight"), currency="₹")
        self.assertEqual(response["result"], "₹10.000")

    def test_other_messages_get_no_reply(self):
        self.assertIsNone(handle_message({"type": "PING"}))
        self.assertIsNone(handle_message("CALCULATE_OFFLINE"))


class TestOfflineBridge(unittest.IsolatedAsyncioTestCase):

    async def test_without_worker_computes_in_process(self):
        bridge = OfflineComputeBridge(None, currency="₹")
        self.assertEqual(await bridge.calculate(0.5, 20, "volume"), "₹10.00")

    async def test_stopped_worker_falls_back(self):
        bridge = OfflineComputeBridge(OfflineComputeWorker(currency="₹"), currency="₹")
        self.assertEqual(await bridge.calculate(0.5, 20, "volume"), "₹10.00")

    async def test_worker_matches_fallback(self):
        worker = OfflineComputeWorker(currency="₹").start()
        self.addAsyncCleanup(worker.stop)
        bridge = OfflineComputeBridge(worker, timeout=1, currency="₹")
        for quantity, rate, category in [(0.5, 20, "volume"), (12.345, 7.77, "weight"), (3.785, 1 / 3, "volume")]:
            self.assertEqual(await bridge.calculate(quantity, rate, category),
                             bridge.compute_locally(quantity, rate, category))
        self.assertEqual(bridge.pending, 0)

    async def test_silent_worker_times_out_to_fallback(self):
        worker = _SilentWorker()
        bridge = OfflineComputeBridge(worker, timeout=0.01, currency="₹")
        self.assertEqual(await bridge.calculate(2, 5, "weight"), "₹10.000")
        self.assertEqual(len(worker.inbox), 1)
        _, reply = worker.inbox[0]
        # the late answer has nowhere to land
        self.assertTrue(reply.cancelled())
        self.assertEqual(bridge.pending, 0)

    async def test_abandoned_request(self):
        worker = _SilentWorker()
        bridge = OfflineComputeBridge(worker, timeout=5, currency="₹")
        task = asyncio.ensure_future(bridge.calculate(2, 5, "weight"))
        await asyncio.sleep(0)
        self.assertEqual(bridge.abandon_all(), 1)
        self.assertEqual(await task, "₹10.000")
        self.assertTrue(worker.inbox[0][1].cancelled())


class _GatedBridge:
    '''Bridge double that answers only once released.'''

    def __init__(self):
        self.release = asyncio.Event()

    async def calculate(self, quantity, rate, category):
        await self.release.wait()
        return "LATE"


class _ManualBridge:
    '''Bridge double; each call waits for its own gate.'''

    def __init__(self):
        self.gates = []

    async def calculate(self, quantity, rate, category):
        gate = asyncio.Event()
        self.gates.append(gate)
        await gate.wait()
        return f"₹{quantity * rate:.2f}"


class TestCalculatorOffline(unittest.IsolatedAsyncioTestCase):

    def _calculator(self):
        calc = CalculatorStateMachine(currency="₹").set_event_bus(EventBus())
        calc.select_category("volume")
        calc.configure_rate(60, 3)
        return calc

    async def test_offline_result_stored(self):
        calc = self._calculator()
        quote = await calc.calculate_price_offline(500, OfflineComputeBridge(None, currency="₹"), "ml")
        self.assertEqual(quote.formatted, "₹10.00")
        self.assertAlmostEqual(quote.value, 10.0)
        self.assertIs(calc.state.quantity_form.result, quote)

    async def test_offline_declines_invalid_input(self):
        calc = self._calculator()
        self.assertIsNone(await calc.calculate_price_offline("", OfflineComputeBridge(None)))

    async def test_late_result_after_clear_is_ignored(self):
        calc = self._calculator()
        bridge = _GatedBridge()
        task = asyncio.ensure_future(calc.calculate_price_offline(500, bridge, "ml"))
        await asyncio.sleep(0)
        calc.clear("quantity-to-price")
        bridge.release.set()
        self.assertIsNone(await task)
        self.assertIsNone(calc.state.quantity_form.result)

    async def test_late_result_after_back_is_ignored(self):
        calc = self._calculator()
        bridge = _GatedBridge()
        task = asyncio.ensure_future(calc.calculate_price_offline(500, bridge, "ml"))
        await asyncio.sleep(0)
        calc.back()
        bridge.release.set()
        self.assertIsNone(await task)
        self.assertEqual(calc.step, "base-rate-configuration")

    async def test_older_request_finishing_last_is_ignored(self):
        calc = self._calculator()
        bridge = _ManualBridge()
        older = asyncio.ensure_future(calc.calculate_price_offline(500, bridge, "ml"))
        await asyncio.sleep(0)
        newer = asyncio.ensure_future(calc.calculate_price_offline(1000, bridge, "ml"))
        await asyncio.sleep(0)
        self.assertEqual(len(bridge.gates), 2)
        bridge.gates[1].set()
        quote = await newer
        self.assertEqual(quote.formatted, "₹20.00")
        bridge.gates[0].set()
        self.assertIsNone(await older)
        form = calc.state.quantity_form
        self.assertIs(form.result, quote)
        self.assertEqual(form.value, 1000)


if __name__ == '__main__':
    unittest.main()
