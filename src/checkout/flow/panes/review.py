from checkout.flow.panes.base import Pane


class ReviewPane(Pane):
    """Read-only recap of what the customer entered on earlier steps."""

    pane_id = "review"
    label = "Review"
    step_id = "review"

    def build(self, order, actor):
        sections = []
        for pane in self.registry.panes:
            if pane is self or not pane.is_visible(order, actor):
                continue
            summary = pane.summary(order)
            if summary:
                sections.append({"pane": pane.pane_id, "label": pane.label, "summary": summary})
        return {"sections": sections}
