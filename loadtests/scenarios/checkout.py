"""Checkout load test scenarios.

Stateful SequentialTaskSet journeys covering a guest walking a cart through
every checkout step, a shopper who opens steps out of order, and a cart that
is emptied after checkout has started.
"""

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import cart_data, cart_item_data, order_information_values, session_id
from loadtests.helpers.response import extract_error_detail, landed_step
from loadtests.helpers.state import CheckoutState


class _CheckoutJourney(SequentialTaskSet):
    """Creates a guest cart with items; subclasses walk it through checkout."""

    items_per_cart = 2

    def on_start(self):
        self.state = CheckoutState(session_id=session_id())

    def _create_cart(self):
        with self.client.post(
            "/carts",
            json=cart_data(session=self.state.session_id),
            catch_response=True,
            name="POST /carts",
        ) as resp:
            if resp.status_code == 201:
                self.state.order_id = resp.json()["cart_id"]
            else:
                resp.failure(f"Create cart failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

        for _ in range(self.items_per_cart):
            with self.client.post(
                f"/carts/{self.state.order_id}/items",
                json=cart_item_data(),
                catch_response=True,
                name="POST /carts/{id}/items",
            ) as resp:
                if resp.status_code == 201:
                    self.state.item_ids.append(resp.json()["item_id"])
                else:
                    resp.failure(f"Add cart item failed: {resp.status_code} — {extract_error_detail(resp)}")
                    self.interrupt()

    def _open(self, step_id=None, expected_step=None):
        url = f"/checkout/{self.state.order_id}" + (f"/{step_id}" if step_id else "")
        with self.client.get(
            url,
            headers=self.state.headers,
            catch_response=True,
            name="GET /checkout/{id}/{step}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Open checkout failed: {resp.status_code} — {extract_error_detail(resp)}")
                return None
            self.state.current_step = resp.json()["step"]
            if expected_step and self.state.current_step != expected_step:
                resp.failure(f"Expected step {expected_step}, landed on {self.state.current_step}")
            return resp.json()

    def _submit(self, step_id, values):
        with self.client.post(
            f"/checkout/{self.state.order_id}/{step_id}",
            data=values,
            headers=self.state.headers,
            catch_response=True,
            name=f"POST /checkout/{{id}}/{step_id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Submit {step_id} failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()
            self.state.current_step = landed_step(resp)
            return resp.json()


class GuestCheckoutJourney(_CheckoutJourney):
    """Create Cart -> Add Items -> Login as Guest -> Order Information ->
    Review and Pay -> Completion page.

    The happy path. Each order placed takes the next order number.
    """

    @task
    def create_cart(self):
        self._create_cart()

    @task
    def open_checkout(self):
        self._open(expected_step="login")

    @task
    def continue_as_guest(self):
        self._submit("login", {"guest.continue": "1"})

    @task
    def enter_order_information(self):
        self._submit("order_information", order_information_values())

    @task
    def pay(self):
        page = self._submit("review", {})
        if self.state.current_step == "complete":
            self.state.order_number = page["panes"][0]["content"].get("order_number")

    @task
    def done(self):
        self.interrupt()


class OutOfOrderJourney(_CheckoutJourney):
    """Open steps the shopper has not reached and expect to be sent back.

    Exercises the redirect path of the step sequencer.
    """

    @task
    def create_cart(self):
        self._create_cart()

    @task
    def jump_to_review(self):
        self._open("review", expected_step="login")

    @task
    def continue_as_guest(self):
        self._submit("login", {"guest.continue": "1"})

    @task
    def jump_to_complete(self):
        self._open("complete", expected_step="order_information")

    @task
    def done(self):
        self.interrupt()


class EmptiedCartJourney(_CheckoutJourney):
    """Start checkout, remove every item, and expect checkout to be closed.

    Generates CheckoutStarted, then CartItemRemoved events until the order
    returns to the cart.
    """

    items_per_cart = 1

    @task
    def create_cart(self):
        self._create_cart()

    @task
    def continue_as_guest(self):
        self._submit("login", {"guest.continue": "1"})

    @task
    def remove_items(self):
        for item_id in self.state.item_ids:
            with self.client.delete(
                f"/carts/{self.state.order_id}/items/{item_id}",
                catch_response=True,
                name="DELETE /carts/{id}/items/{item_id}",
            ) as resp:
                if resp.status_code != 200:
                    resp.failure(f"Remove item failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def checkout_is_closed(self):
        with self.client.get(
            f"/checkout/{self.state.order_id}",
            headers=self.state.headers,
            catch_response=True,
            name="GET /checkout/{id}/{step}",
        ) as resp:
            if resp.status_code == 403:
                resp.success()
            else:
                resp.failure(f"Expected 403 for an emptied cart, got {resp.status_code}")

    @task
    def done(self):
        self.interrupt()


class CheckoutUser(HttpUser):
    """Locust user simulating shoppers checking out.

    Weighted distribution:
    - 60% Guest checkout (happy path)
    - 25% Out of order step access
    - 15% Cart emptied during checkout
    """

    wait_time = between(0.5, 2.0)
    tasks = {
        GuestCheckoutJourney: 12,
        OutOfOrderJourney: 5,
        EmptiedCartJourney: 3,
    }
