import simpy

# High-rate topics that are not echoed to the console
QUIET_TOPICS = frozenset({"car/status"})


class MessageBroker:
    """
    Mediates communication between the car, the serial link and recorders.
    Implements a topic-based publish-subscribe model.
    """
    def __init__(self, env: simpy.Environment, verbose: bool = True, quiet_topics=QUIET_TOPICS):
        """
        Initialize the message broker

        Args:
            env (simpy.Environment): SimPy environment
            verbose (bool): Echo publications to the console
            quiet_topics: Topics never echoed, even when verbose
        """
        self.env = env
        self.verbose = verbose
        self.quiet_topics = frozenset(quiet_topics)
        self.topics = {}  # Dictionary to hold Store for each topic
        self.broadcast_pipe = simpy.Store(self.env)

    def get_pipe(self, topic: str) -> simpy.Store:
        """
        Get or create a communication pipe (Store) for the specified topic
        """
        if topic not in self.topics:
            self.topics[topic] = simpy.Store(self.env)
        return self.topics[topic]

    def put(self, topic: str, message):
        """
        Publish (put) a message to the specified topic

        Topic pipes are only filled once someone has subscribed via
        get_pipe()/get(); the broadcast pipe always receives a copy.
        """
        if self.verbose and topic not in self.quiet_topics:
            print(f"{self.env.now:.2f} [Broker] Publish on '{topic}': {message}")
        broadcast = self.broadcast_pipe.put({'topic': topic, 'message': message})
        pipe = self.topics.get(topic)
        if pipe is None:
            return broadcast
        return pipe.put(message)

    def get(self, topic: str):
        """
        Wait to receive (get) a message from the specified topic
        """
        pipe = self.get_pipe(topic)
        return pipe.get()

    def get_broadcast_pipe(self) -> simpy.Store:
        """
        Returns the global broadcast pipe used by recorders
        """
        return self.broadcast_pipe

    def get_current_time(self) -> float:
        """
        Get current simulation time without exposing the SimPy environment
        """
        return self.env.now
