"""Service layer for Energy Clash.

Services sit between the session state and the blockchain collaborator.
They depend on the :class:`~energyclash.interfaces.IChainGateway` protocol
so tests can inject in-memory fakes instead of a live node:

    class FakeChain:
        async def balance_of(self, address):
            return 10**20
        ...

    service = GameService(GameSession(), FakeChain())
    result = await service.claim(HexCoord(x=0, y=0))
"""

from energyclash.services.game_service import GameService, territory_from_record

__all__ = ["GameService", "territory_from_record"]
